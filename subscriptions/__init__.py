"""
Subscription plan gating and checkout.

plan_gate holds the pure decisions; services wires them to the Razorpay
gateway, the activation collaborator and the order registry.
"""
