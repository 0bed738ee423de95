"""
Request body schemas for admin mutations.

Field names match table columns; aliases are the camelCase keys clients send.
Unknown keys are rejected so typos surface as field errors instead of being
silently dropped.
"""

from datetime import datetime
from typing import List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from vanguard_admin.errors import ValidationFailed

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

ContactStatus = Literal["new", "in_progress", "resolved", "closed"]
Priority = Literal["low", "medium", "high", "urgent"]
MemberStatus = Literal["pending", "active", "suspended", "cancelled"]
OrderStatus = Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled", "refunded"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded", "partially_refunded"]
VolunteerStatus = Literal["pending", "reviewing", "shortlisted", "interviewed", "accepted", "rejected"]
RegistrationStatus = Literal["pending", "confirmed", "paid", "cancelled", "refunded"]
StoryStatus = Literal["pending", "in_review", "approved", "rejected", "published"]
DonationStatus = Literal["pending", "completed", "failed", "refunded"]
NewsStatus = Literal["draft", "published", "archived"]
NewsCategory = Literal["announcement", "update", "event", "achievement", "partnership", "other"]
JobStatus = Literal["draft", "open", "closed", "filled"]
JobType = Literal["full-time", "part-time", "contract", "internship", "volunteer"]
JobDepartment = Literal["advocacy", "legal", "communications", "programs", "operations", "finance", "other"]
LocationType = Literal["remote", "hybrid", "on-site"]
SubmissionStatus = Literal["pending", "in_review", "approved", "rejected", "published"]
ProductStatus = Literal["draft", "active", "inactive", "archived"]
ProductCategory = Literal["book", "merchandise", "digital", "service", "other"]


class _Body(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)


# ── Updates ──────────────────────────────────────────────────────────

class ContactUpdate(_Body):
    status: Optional[ContactStatus] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = Field(None, max_length=5000)
    response: Optional[str] = Field(None, max_length=5000)


class MemberUpdate(_Body):
    status: Optional[MemberStatus] = None
    is_active: Optional[bool] = Field(None, alias="isActive")
    notes: Optional[str] = Field(None, max_length=5000)


class OrderUpdate(_Body):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = Field(None, alias="paymentStatus")
    tracking_number: Optional[str] = Field(None, alias="trackingNumber", max_length=100)
    notes: Optional[str] = Field(None, max_length=5000)


class VolunteerUpdate(_Body):
    status: Optional[VolunteerStatus] = None
    review_notes: Optional[str] = Field(None, alias="reviewNotes", max_length=5000)


class RegistrationUpdate(_Body):
    status: Optional[RegistrationStatus] = None
    payment_status: Optional[PaymentStatus] = Field(None, alias="paymentStatus")


class StoryUpdate(_Body):
    status: Optional[StoryStatus] = None
    review_notes: Optional[str] = Field(None, alias="reviewNotes", max_length=1000)
    featured: Optional[bool] = None


class DonationUpdate(_Body):
    status: Optional[DonationStatus] = None
    notes: Optional[str] = Field(None, max_length=5000)


class SubmissionUpdate(_Body):
    status: Optional[SubmissionStatus] = None
    review_notes: Optional[str] = Field(None, alias="reviewNotes", max_length=5000)
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None


# ── Review transitions ───────────────────────────────────────────────

class PublishSubmission(_Body):
    review_notes: Optional[str] = Field(None, alias="reviewNotes", max_length=5000)
    featured: bool = False


class RejectSubmission(_Body):
    review_notes: str = Field(alias="reviewNotes", min_length=1, max_length=5000)
    reason: Optional[str] = Field(None, max_length=500)


# ── Content create / update ──────────────────────────────────────────

class NewsCreate(_Body):
    title: str = Field(min_length=3, max_length=200)
    slug: str = Field(min_length=3, max_length=220, pattern=SLUG_PATTERN)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    category: NewsCategory = "update"
    status: NewsStatus = "draft"
    author: Optional[str] = Field(None, max_length=120)
    is_featured: bool = Field(False, alias="isFeatured")
    tags: List[str] = Field(default_factory=list)


class NewsUpdate(_Body):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    slug: Optional[str] = Field(None, min_length=3, max_length=220, pattern=SLUG_PATTERN)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    category: Optional[NewsCategory] = None
    status: Optional[NewsStatus] = None
    author: Optional[str] = Field(None, max_length=120)
    is_featured: Optional[bool] = Field(None, alias="isFeatured")
    tags: Optional[List[str]] = None


class JobCreate(_Body):
    title: str = Field(min_length=3, max_length=200)
    slug: str = Field(min_length=3, max_length=220, pattern=SLUG_PATTERN)
    description: str = Field(min_length=1)
    department: JobDepartment = "other"
    job_type: JobType = Field("full-time", alias="type")
    location: Optional[str] = Field(None, max_length=200)
    location_type: LocationType = Field("on-site", alias="locationType")
    status: JobStatus = "draft"
    deadline: Optional[datetime] = None


class JobUpdate(_Body):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    slug: Optional[str] = Field(None, min_length=3, max_length=220, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    department: Optional[JobDepartment] = None
    job_type: Optional[JobType] = Field(None, alias="type")
    location: Optional[str] = Field(None, max_length=200)
    location_type: Optional[LocationType] = Field(None, alias="locationType")
    status: Optional[JobStatus] = None
    deadline: Optional[datetime] = None


class ProductInventory(_Body):
    track_quantity: bool = Field(False, alias="trackQuantity")
    quantity: int = Field(0, ge=0)
    low_stock_threshold: int = Field(5, alias="lowStockThreshold", ge=0)
    allow_backorder: bool = Field(False, alias="allowBackorder")


class ProductImage(_Body):
    url: str = Field(pattern=r"^https?://\S+$", max_length=500)
    alt: Optional[str] = Field(None, max_length=200)
    is_primary: bool = Field(False, alias="isPrimary")


class ProductCreate(_Body):
    name: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=220, pattern=SLUG_PATTERN)
    description: str = Field(min_length=1)
    short_description: Optional[str] = Field(None, alias="shortDescription", max_length=300)
    price: float = Field(ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    compare_at_price: Optional[float] = Field(None, alias="compareAtPrice", ge=0)
    cost_price: Optional[float] = Field(None, alias="costPrice", ge=0)
    sku: Optional[str] = Field(None, max_length=60)
    barcode: Optional[str] = Field(None, max_length=60)
    category: ProductCategory
    subcategory: Optional[str] = Field(None, max_length=60)
    tags: List[str] = Field(default_factory=list)
    status: ProductStatus = "draft"
    is_digital: bool = Field(False, alias="isDigital")
    is_physical: bool = Field(True, alias="isPhysical")
    inventory: Optional[ProductInventory] = None
    images: List[ProductImage] = Field(default_factory=list)
    is_featured: bool = Field(False, alias="isFeatured")
    is_new: bool = Field(False, alias="isNew")
    is_on_sale: bool = Field(False, alias="isOnSale")


class ProductUpdate(_Body):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=220, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    short_description: Optional[str] = Field(None, alias="shortDescription", max_length=300)
    price: Optional[float] = Field(None, ge=0)
    compare_at_price: Optional[float] = Field(None, alias="compareAtPrice", ge=0)
    cost_price: Optional[float] = Field(None, alias="costPrice", ge=0)
    sku: Optional[str] = Field(None, max_length=60)
    category: Optional[ProductCategory] = None
    subcategory: Optional[str] = Field(None, max_length=60)
    tags: Optional[List[str]] = None
    status: Optional[ProductStatus] = None
    inventory: Optional[ProductInventory] = None
    images: Optional[List[ProductImage]] = None
    is_featured: Optional[bool] = Field(None, alias="isFeatured")
    is_new: Optional[bool] = Field(None, alias="isNew")
    is_on_sale: Optional[bool] = Field(None, alias="isOnSale")


# ── Validation entry point ───────────────────────────────────────────

def _details(exc: PydanticValidationError) -> List[dict]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]


def validate_body(schema: Type[BaseModel], body, partial: bool = True) -> dict:
    """Validate a JSON body and return values keyed by column name.

    With *partial* (updates) only the non-null fields the client supplied
    are returned; otherwise (creates) schema defaults are filled in.
    """
    if not isinstance(body, dict):
        raise ValidationFailed.field("body", "Request body must be a JSON object")
    try:
        model = schema.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationFailed(_details(e)) from None

    if partial:
        values = model.model_dump(exclude_unset=True, exclude_none=True)
    else:
        values = model.model_dump()
    if not values:
        raise ValidationFailed.field("body", "No updatable fields supplied")
    return values
