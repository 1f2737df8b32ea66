"""
API роутеры
"""
