"""Stripe Checkout for the artist membership fee."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict

import stripe

from app.core import errors
from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    session_id: str
    url: str


@dataclass
class SessionStatus:
    payment_status: str
    metadata: Dict[str, str] = field(default_factory=dict)


def to_minor_units(amount: Decimal) -> int:
    # Stripe expects the smallest currency unit
    return int((amount * 100).to_integral_value())


class StripeGateway:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _api_key(self) -> str:
        if not self.settings.STRIPE_SECRET_KEY:
            raise errors.InternalError(
                "Payment provider is not configured",
                detail="Stripe secret key missing (STRIPE_SECRET_KEY)",
            )
        return self.settings.STRIPE_SECRET_KEY

    def create_checkout_session(self, product_name: str, amount: Decimal, metadata: Dict[str, str]) -> CheckoutSession:
        api_key = self._api_key()
        try:
            session = stripe.checkout.Session.create(
                api_key=api_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[{
                    "price_data": {
                        "currency": self.settings.PAYMENT_CURRENCY,
                        "product_data": {"name": product_name},
                        "unit_amount": to_minor_units(amount),
                    },
                    "quantity": 1,
                }],
                success_url=self.settings.STRIPE_SUCCESS_URL,
                cancel_url=self.settings.STRIPE_CANCEL_URL,
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.exception("Stripe checkout session creation failed.")
            raise errors.InternalError("Error creating checkout session", detail=str(exc)) from exc
        return CheckoutSession(session_id=session["id"], url=session["url"])

    def retrieve_session(self, session_id: str) -> SessionStatus:
        api_key = self._api_key()
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=api_key)
        except stripe.InvalidRequestError as exc:
            raise errors.ValidationError("Invalid checkout session", detail=str(exc)) from exc
        except stripe.StripeError as exc:
            logger.exception("Stripe session retrieval failed.")
            raise errors.InternalError("Error verifying payment", detail=str(exc)) from exc
        metadata = session.get("metadata") or {}
        return SessionStatus(
            payment_status=session.get("payment_status") or "",
            metadata={key: metadata[key] for key in metadata.keys()},
        )
