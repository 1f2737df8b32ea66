"""
Сервисы бронирования и расписания
"""
