"""
Dev Availability Calendar - backend
"""
