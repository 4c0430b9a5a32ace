"""
Payment processors.

Routes get the shared processor through the get_payment_processor dependency:
    - "stripe": PaymentIntents on the real Stripe API
    - "demo":   in-process intents that succeed immediately

Both expose create_intent() and confirm(). An intent only remembers who is
paying and which artwork ids are being paid for; checkout rebuilds the order
snapshot from the artworks table.
"""
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

import stripe

from marketplace.core.config import (
    PAYMENT_PROVIDER, PAYMENT_CURRENCY, STRIPE_SECRET_KEY, STRIPE_API_VERSION,
)
from marketplace.core.log import get_logger

logger = get_logger(__name__, "PAYMENT")

# Stripe rejects metadata values longer than this
STRIPE_METADATA_VALUE_LIMIT = 500

# Unconfirmed demo intents kept before the oldest are dropped
DEMO_MAX_INTENTS = 1000


class PaymentProviderError(Exception):
    """The provider could not be reached or rejected the request."""


@dataclass
class PaymentIntent:
    payment_intent_id: str
    client_secret: Optional[str]
    amount: int


@dataclass
class PaymentConfirmation:
    payment_intent_id: str
    succeeded: bool
    amount: int
    user_id: Optional[int]
    artwork_ids: list = field(default_factory=list)
    status: str = ""


def encode_artwork_ids(artwork_ids) -> str:
    return ",".join(str(int(i)) for i in artwork_ids)


def decode_artwork_ids(raw: Optional[str]) -> list:
    return [int(part) for part in (raw or "").split(",") if part.strip()]


class StripeProcessor:
    name = "stripe"

    def __init__(self, api_key: str, currency: str = PAYMENT_CURRENCY):
        if not api_key:
            raise PaymentProviderError("STRIPE_SECRET_KEY is not set")
        stripe.api_key = api_key
        stripe.api_version = STRIPE_API_VERSION
        self.currency = currency

    def create_intent(self, amount: int, user_id: int, artwork_ids: list) -> PaymentIntent:
        encoded = encode_artwork_ids(artwork_ids)
        if len(encoded) > STRIPE_METADATA_VALUE_LIMIT:
            raise PaymentProviderError(f"Too many items for one payment ({len(artwork_ids)})")

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                metadata={
                    "user_id": str(user_id),
                    "artwork_ids": encoded,
                },
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            logger.warning(f"create_intent failed user={user_id}: {exc!r}")
            raise PaymentProviderError(str(exc)) from exc

        logger.info(f"intent created id={intent.id} user={user_id} amount={amount}")
        return PaymentIntent(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=amount,
        )

    def confirm(self, payment_intent_id: str) -> PaymentConfirmation:
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            logger.warning(f"retrieve failed id={payment_intent_id}: {exc!r}")
            raise PaymentProviderError(str(exc)) from exc

        metadata = intent.metadata or {}
        raw_user = metadata.get("user_id")
        return PaymentConfirmation(
            payment_intent_id=intent.id,
            succeeded=intent.status == "succeeded",
            amount=intent.amount,
            user_id=int(raw_user) if raw_user else None,
            artwork_ids=decode_artwork_ids(metadata.get("artwork_ids")),
            status=intent.status,
        )


class DemoProcessor:
    """
    Keeps intents in memory and marks every one of them as paid.

    At most max_intents are held; the oldest are forgotten first.
    """

    name = "demo"

    def __init__(self, max_intents: int = DEMO_MAX_INTENTS):
        self.max_intents = max_intents
        self._intents = OrderedDict()

    def create_intent(self, amount: int, user_id: int, artwork_ids: list) -> PaymentIntent:
        intent_id = f"pi_demo_{uuid.uuid4().hex[:24]}"
        self._intents[intent_id] = {
            "amount": amount,
            "user_id": user_id,
            "artwork_ids": list(artwork_ids),
        }
        while len(self._intents) > self.max_intents:
            self._intents.popitem(last=False)

        logger.info(f"demo intent created id={intent_id} user={user_id} amount={amount}")
        return PaymentIntent(
            payment_intent_id=intent_id,
            client_secret=f"{intent_id}_secret",
            amount=amount,
        )

    def confirm(self, payment_intent_id: str) -> PaymentConfirmation:
        intent = self._intents.get(payment_intent_id)
        if intent is None:
            raise PaymentProviderError(f"No such payment intent: {payment_intent_id}")
        return PaymentConfirmation(
            payment_intent_id=payment_intent_id,
            succeeded=True,
            amount=intent["amount"],
            user_id=intent["user_id"],
            artwork_ids=list(intent["artwork_ids"]),
            status="succeeded",
        )


def build_processor(provider: str = PAYMENT_PROVIDER):
    if provider == "stripe":
        return StripeProcessor(STRIPE_SECRET_KEY)
    if provider == "demo":
        return DemoProcessor()
    raise ValueError(f"Unknown PAYMENT_PROVIDER: {provider!r}")
