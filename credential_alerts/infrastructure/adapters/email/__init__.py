"""E-mail sender adapters."""

from .graph_mail import GraphMailConfig, GraphMailSender
from .sendgrid import SendGridConfig, SendGridEmailSender

__all__ = [
    "GraphMailConfig",
    "GraphMailSender",
    "SendGridConfig",
    "SendGridEmailSender",
]
