"""PayBridge core - payment orchestration between client applications and payment providers."""

__version__ = "0.1.0"
