"""Use cases específicos de WhatsApp."""

from .send_outbound_message import OutboundDispatcher

__all__ = ["OutboundDispatcher"]
