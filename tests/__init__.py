"""
Test suite for limit-order-gatekeeper

Contains:
- tests/factories.py : константы тестового мира и builders операций
- tests/unit/        : Unit тесты модулей и end-to-end сценарии executor
"""
