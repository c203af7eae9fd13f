"""
Core domain models, signing, call decoding and integer math.

This module contains the foundational building blocks that are independent
of the credit account system, price oracle and adapters (see ports.py).
"""
