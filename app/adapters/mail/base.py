from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutboundMail:
	"""A fully composed email ready to hand to a transport."""

	sender: str
	to: str
	reply_to: str
	subject: str
	text_body: str
	html_body: str


class AbstractMailTransport(ABC):
	"""Interface for services that deliver composed emails."""

	@abstractmethod
	async def send(self, mail: OutboundMail) -> str:
		"""Deliver a message.

		Args:
			mail: Composed message to deliver.

		Returns:
			str: Identifier assigned to the message (e.g., its Message-ID).

		Raises:
			MailTransportError: If the relay is unreachable or rejects the message.
		"""
		...

	async def verify(self) -> None:
		"""Check that the relay accepts our credentials.

		Transports without a meaningful check keep this no-op.

		Raises:
			MailTransportError: If the relay cannot be reached or rejects login.
		"""
		return None
