"""SchoolPay API - multi-tenant student records and Paystack fee payments."""

__version__ = "0.1.0"
