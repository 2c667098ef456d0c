"""
Модуль: `services/__init__.py`.
Назначение: Прикладные операции над хранилищем (пользователи, сессии, голоса).
"""
