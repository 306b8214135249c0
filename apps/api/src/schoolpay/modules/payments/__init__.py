"""
Payments module - Paystack fee payments.

Handles the two halves of a payment:
1. Initiation: open a Paystack transaction for a student and store its reference
2. Reconciliation: verify Paystack's signed webhook and mark the student Paid

API Endpoints:
- POST /payments/students/{student_id}/initiate - Start a payment (authenticated)
- POST /payments/webhook - Paystack webhook receiver (signature-authenticated)
"""
