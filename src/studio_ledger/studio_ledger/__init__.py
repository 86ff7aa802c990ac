"""Studio Ledger package.

Feature modules (sessions, people, attendance, payments, ...) with a thin Flask
controller layer over service/repository layers backed by MySQL.
"""
