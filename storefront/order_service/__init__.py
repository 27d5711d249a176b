"""
Order service: transactional order creation and cancellation
"""
