"""skillhook - route inbound webhooks to installed skills"""
__version__ = "0.1.0"
