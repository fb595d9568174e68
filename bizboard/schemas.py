from pydantic import AfterValidator, AliasChoices, BaseModel, EmailStr, Field, root_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List, Dict, Any, Type, TypeVar
from datetime import datetime, timezone
from enum import Enum

from .core.exceptions import ValidationError
from .models import MAX_ID

ModelT = TypeVar("ModelT", bound=BaseModel)


def metadata_field():
    # JSON map columns are stored under "meta" on the ORM side
    return Field(default_factory=dict, validation_alias=AliasChoices("meta", "metadata"))


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive values; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Timestamps in responses always carry their UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class APIModel(BaseModel):
    """
    Base for every request/response model.
    JSON is camelCase on the wire; snake_case keys are accepted on input too.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True
        validate_default = True


# ====================================================================================
# --- Enums: fixed sets of choices for specific fields. ---
# ====================================================================================
class UserRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class IntegrationStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ActivityType(str, Enum):
    """Activity types emitted by the server itself. Clients may send others."""
    INTEGRATION_ADDED = "integration_added"
    INTEGRATION_SYNCED = "integration_synced"
    INTEGRATION_REMOVED = "integration_removed"
    RECOMMENDATION_IMPLEMENTED = "recommendation_implemented"
    MEMBER_ADDED = "member_added"
    COMPANY_UPDATED = "company_updated"


# ====================================================================================
# --- Validation helper ---
# ====================================================================================
def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


def validate_insert(schema: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    """Validate ``payload`` against an insert schema.

    Returns the normalized model, or raises ``ValidationError`` naming every
    offending field. Has no side effects.
    """
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from exc


def partial_updates(body: BaseModel, nullable: tuple = ()) -> Dict[str, Any]:
    """Fields the client actually sent, minus explicit nulls on required columns."""
    values = body.model_dump(exclude_unset=True)
    return {
        key: value
        for key, value in values.items()
        if value is not None or key in nullable
    }


# ====================================================================================
# --- Auth Schemas ---
# ====================================================================================
class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(APIModel):
    """
    Registration form. Creates a new company (named ``company_name``) with the
    registering user as its admin.
    """
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: Optional[str] = None
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)

    @root_validator(skip_on_failure=True)
    def passwords_match(cls, values):
        confirm = values.get("confirm_password")
        if confirm is not None and confirm != values.get("password"):
            raise ValueError("Passwords don't match")
        return values


# ====================================================================================
# --- User Schemas ---
# ====================================================================================
class UserInsert(APIModel):
    """Insert shape for users. ``password`` must already be hashed."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.MEMBER
    is_active: bool = True
    company_id: Optional[int] = None


class UserProfileUpdate(APIModel):
    """Fields a user may change on their own profile."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)


class TeamMemberCreate(APIModel):
    """Admin-created member of the caller's company."""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.MEMBER
    password: Optional[str] = Field(None, min_length=6)


class TeamMemberUpdate(APIModel):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    job_title: Optional[str] = Field(None, max_length=100)


class UserResponse(APIModel):
    id: int
    email: str
    first_name: str
    last_name: str
    job_title: Optional[str] = None
    role: str
    is_active: bool
    last_active_at: Optional[UTCDateTime] = None
    company_id: Optional[int] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TeamMemberCreateResponse(APIModel):
    user: UserResponse
    temporary_password: Optional[str] = None


class AuthResponse(APIModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


# ====================================================================================
# --- Company Schemas ---
# ====================================================================================
class CompanyInsert(APIModel):
    name: str = Field(..., min_length=1, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    logo: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class CompanyUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    logo: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class CompanyResponse(APIModel):
    id: int
    name: str
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ====================================================================================
# --- Integration Schemas ---
# ====================================================================================
class IntegrationCreate(APIModel):
    """
    Client body for a new integration. Any ``companyId`` in the body is
    ignored; the tenant always comes from the session.
    """
    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., min_length=1, max_length=50)
    provider: str = Field(..., min_length=1, max_length=100)
    status: IntegrationStatus = IntegrationStatus.DISCONNECTED
    config: Dict[str, Any] = Field(default_factory=dict)
    credentials: Dict[str, Any] = Field(default_factory=dict)
    data_points: int = Field(0, ge=0, le=MAX_ID)


class IntegrationInsert(IntegrationCreate):
    company_id: int


class IntegrationUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    provider: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[IntegrationStatus] = None
    config: Optional[Dict[str, Any]] = None
    credentials: Optional[Dict[str, Any]] = None
    last_sync_at: Optional[datetime] = None
    data_points: Optional[int] = Field(None, ge=0, le=MAX_ID)


class IntegrationResponse(APIModel):
    """Integration as returned to clients. Stored credentials are write-only."""
    id: int
    company_id: int
    name: str
    type: str
    provider: str
    status: str
    config: Dict[str, Any] = Field(default_factory=dict)
    last_sync_at: Optional[UTCDateTime] = None
    data_points: int
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ====================================================================================
# --- KPI Metric Schemas ---
# ====================================================================================
class KpiMetricCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=50)
    previous_value: Optional[str] = Field(None, max_length=50)
    change_percentage: Optional[str] = Field(None, max_length=20)
    period: str = Field(..., min_length=1, max_length=50)
    icon: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=20)


class KpiMetricInsert(KpiMetricCreate):
    company_id: int


class KpiMetricUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    value: Optional[str] = Field(None, min_length=1, max_length=50)
    previous_value: Optional[str] = Field(None, max_length=50)
    change_percentage: Optional[str] = Field(None, max_length=20)
    period: Optional[str] = Field(None, min_length=1, max_length=50)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, min_length=1, max_length=20)


class KpiMetricResponse(APIModel):
    id: int
    company_id: int
    name: str
    value: str
    previous_value: Optional[str] = None
    change_percentage: Optional[str] = None
    period: str
    icon: str
    color: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ====================================================================================
# --- Chart Data Schemas ---
# ====================================================================================
class ChartDataPointCreate(APIModel):
    chart_type: str = Field(..., min_length=1, max_length=50)
    label: str = Field(..., min_length=1, max_length=100)
    value: float
    date: datetime
    metadata: Dict[str, Any] = metadata_field()


class ChartDataPointInsert(ChartDataPointCreate):
    company_id: int


class ChartDataPointResponse(APIModel):
    id: int
    company_id: int
    chart_type: str
    label: str
    value: float
    date: UTCDateTime
    metadata: Dict[str, Any] = metadata_field()
    created_at: UTCDateTime


# ====================================================================================
# --- AI Recommendation Schemas ---
# ====================================================================================
class RecommendationCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    priority: str = Field(..., min_length=1, max_length=20)
    confidence: int = Field(..., ge=0, le=100)
    is_implemented: bool = False
    estimated_impact: str = Field(..., min_length=1, max_length=100)
    required_actions: List[str] = Field(default_factory=list)


class RecommendationInsert(RecommendationCreate):
    company_id: int


class RecommendationUpdate(APIModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    priority: Optional[str] = Field(None, min_length=1, max_length=20)
    confidence: Optional[int] = Field(None, ge=0, le=100)
    is_implemented: Optional[bool] = None
    estimated_impact: Optional[str] = Field(None, min_length=1, max_length=100)
    required_actions: Optional[List[str]] = None


class RecommendationResponse(APIModel):
    id: int
    company_id: int
    title: str
    description: str
    category: str
    priority: str
    confidence: int
    is_implemented: bool
    implemented_at: Optional[UTCDateTime] = None
    estimated_impact: str
    required_actions: List[str] = Field(default_factory=list)
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ====================================================================================
# --- Activity Schemas ---
# ====================================================================================
class ActivityCreate(APIModel):
    type: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1)
    source: Optional[str] = Field(None, max_length=100)
    metadata: Dict[str, Any] = metadata_field()


class ActivityInsert(ActivityCreate):
    company_id: int
    user_id: int


class ActivityResponse(APIModel):
    id: int
    company_id: int
    user_id: int
    type: str
    description: str
    source: Optional[str] = None
    metadata: Dict[str, Any] = metadata_field()
    created_at: UTCDateTime


# ====================================================================================
# --- Notification Schemas ---
# ====================================================================================
class NotificationCreate(APIModel):
    """``user_id`` defaults to the caller; it must be a member of the caller's company."""
    user_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    metadata: Dict[str, Any] = metadata_field()


class NotificationInsert(APIModel):
    user_id: int
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    is_read: bool = False
    metadata: Dict[str, Any] = metadata_field()


class NotificationResponse(APIModel):
    id: int
    user_id: int
    title: str
    message: str
    type: str
    is_read: bool
    read_at: Optional[UTCDateTime] = None
    metadata: Dict[str, Any] = metadata_field()
    created_at: UTCDateTime


class UnreadCountResponse(APIModel):
    count: int


class MarkReadResponse(APIModel):
    success: bool


class BulkReadResponse(APIModel):
    updated: int
