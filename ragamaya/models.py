"""Persistent records of the marketplace."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ProductType(str, Enum):
    DIGITAL = "digital"
    PHYSICAL = "physical"


class Roles(str, Enum):
    USER = "user"
    SELLER = "seller"


@dataclass
class Clients:
    """A tracked API client request."""

    id: int = 0
    ip: str = ""
    browser: str = ""
    version: str = ""
    os: str = ""
    device: str = ""
    origin: str = ""
    api: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class Orders:
    id: int = 0
    uuid: str = ""
    user_uuid: str = ""
    product_uuid: str = ""
    quantity: int = 1
    gross_amt: int = 0
    status: str = "pending"
    payment_type: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    payments: list[Payments] = field(default_factory=list)
    user: Users | None = None
    product: Products | None = None


@dataclass
class Payments:
    id: int = 0
    uuid: str = ""
    user_uuid: str = ""
    product_uuid: str = ""
    order_uuid: str = ""
    gross_amount: int = 0
    payment_type: str = ""
    transaction_time: str = ""
    transaction_status: str = ""
    fraud_status: str = ""
    masked_card: str = ""
    status_code: str = ""
    bank: str = ""
    status_message: str = ""
    approval_code: str = ""
    channel_response_code: str = ""
    channel_response_message: str = ""
    currency: str = ""
    card_type: str = ""
    redirect_url: str = ""
    installment_term: str = ""
    eci: str = ""
    saved_token_id: str = ""
    saved_token_id_expired_at: str = ""
    point_redeem_amount: int = 0
    point_redeem_quantity: int = 0
    point_balance_amount: str = ""
    permata_va_number: str = ""
    bill_key: str = ""
    biller_code: str = ""
    acquirer: str = ""
    payment_code: str = ""
    store: str = ""
    qr_string: str = ""
    on_us: bool = False
    three_ds_version: str = ""
    expiry_time: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    payment_actions: list[PaymentActions] = field(default_factory=list)
    payment_va_numbers: list[PaymentVANumbers] = field(default_factory=list)
    user: Users | None = None
    product: Products | None = None
    order: Orders | None = None


@dataclass
class PaymentActions:
    id: int = 0
    payment_uuid: str = ""
    name: str = ""
    method: str = ""
    url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    payment: Payments | None = None


@dataclass
class PaymentVANumbers:
    id: int = 0
    payment_uuid: str = ""
    bank: str = ""
    va_number: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    payment: Payments | None = None


@dataclass
class Products:
    id: int = 0
    uuid: str = ""
    seller_uuid: str = ""
    product_type: ProductType = ProductType.DIGITAL
    name: str = ""
    description: str = ""
    price: int = 0
    stock: int = 0
    keywords: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    thumbnails: list[ProductThumbnails] = field(default_factory=list)
    digital_files: list[ProductDigitalFiles] = field(default_factory=list)


@dataclass
class ProductThumbnails:
    id: int = 0
    product_uuid: str = ""
    thumbnail_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class ProductDigitalFiles:
    id: int = 0
    product_uuid: str = ""
    file_url: str = ""
    description: str = ""
    extension: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class ProductDigitalOwned:
    """Ownership of a digital product; one record per user and product."""

    id: int = 0
    product_uuid: str = ""
    user_uuid: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    product: Products | None = None
    user: Users | None = None


@dataclass
class SellerJWTPayload:
    uuid: str = ""
    user_uuid: str = ""
    name: str = ""
    avatar_url: str = ""

    def to_dict(self) -> dict:
        """Return the claims as they appear inside a token."""
        return {
            "uuid": self.uuid,
            "user_uuid": self.user_uuid,
            "name": self.name,
            "avatar_url": self.avatar_url,
        }


@dataclass
class Sellers:
    id: int = 0
    uuid: str = ""
    user_uuid: str = ""
    name: str = ""
    desc: str = ""
    address: str = ""
    whatsapp: str = ""
    avatar_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def to_jwt_payload(self) -> SellerJWTPayload:
        """Return the subset of the seller embedded in access tokens."""
        return SellerJWTPayload(
            uuid=self.uuid,
            user_uuid=self.user_uuid,
            name=self.name,
            avatar_url=self.avatar_url,
        )


@dataclass
class Files:
    id: int = 0
    uuid: str = ""
    public_url: str = ""
    original_file_name: str = ""
    size: str = ""
    extension: str = ""
    mime_type: str = ""
    mime_sub_type: str = ""
    meta: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class RefreshToken:
    id: int = 0
    user_uuid: str = ""
    token: str = ""
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class BlacklistedToken:
    id: int = 0
    token: str = ""
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class VerificationToken:
    id: int = 0
    user_uuid: str = ""
    token: str = ""
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class Users:
    id: int = 0
    uuid: str = ""
    email: str = ""
    is_email_verified: bool = False
    sub: str = ""
    name: str = ""
    role: Roles = Roles.USER
    avatar_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    seller_profile: Sellers | None = None
    wallet: Wallet | None = None


@dataclass
class WalletTransactionHistory:
    id: int = 0
    wallet_id: int = 0
    amount: int = 0
    type: str = ""
    reference: str = ""
    note: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class Wallet:
    id: int = 0
    user_uuid: str = ""
    balance: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    transaction_history: list[WalletTransactionHistory] = field(default_factory=list)