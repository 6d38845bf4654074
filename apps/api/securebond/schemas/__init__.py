"""Pydantic schemas for API request/response models."""

from securebond.schemas.alert import AlertCreate, AlertRead, AlertSummary
from securebond.schemas.auth import (
    ClientLoginRequest,
    ClientPhoneLoginRequest,
    MeResponse,
    StaffLoginRequest,
    UserSession,
)
from securebond.schemas.bond import BondCreate, BondRead, BondUpdate
from securebond.schemas.check_in import CheckInCreate, CheckInRead
from securebond.schemas.client import (
    BulkUploadError,
    BulkUploadResult,
    ClientCreate,
    ClientCreateResponse,
    ClientListResponse,
    ClientLocation,
    ClientRead,
    ClientUpdate,
    PasswordResetResponse,
)
from securebond.schemas.company import (
    CompanyConfigurationRead,
    CompanyConfigurationUpdate,
    PublicCompanyInfo,
)
from securebond.schemas.contact import ContactInquiryCreate, ContactInquiryRead
from securebond.schemas.court_date import (
    AttendanceUpdate,
    CourtDateCreate,
    CourtDateRead,
    CourtDateUpdate,
    ReminderRead,
)
from securebond.schemas.expense import ExpenseCreate, ExpenseRead
from securebond.schemas.payment import PaymentCreate, PaymentRead
from securebond.schemas.user import StaffCreate, StaffCreateResponse, StaffRead, StaffUpdate

__all__ = [
    "AlertCreate",
    "AlertRead",
    "AlertSummary",
    "AttendanceUpdate",
    "BondCreate",
    "BondRead",
    "BondUpdate",
    "BulkUploadError",
    "BulkUploadResult",
    "CheckInCreate",
    "CheckInRead",
    "ClientCreate",
    "ClientCreateResponse",
    "ClientListResponse",
    "ClientLocation",
    "ClientLoginRequest",
    "ClientPhoneLoginRequest",
    "ClientRead",
    "ClientUpdate",
    "CompanyConfigurationRead",
    "CompanyConfigurationUpdate",
    "ContactInquiryCreate",
    "ContactInquiryRead",
    "CourtDateCreate",
    "CourtDateRead",
    "CourtDateUpdate",
    "ExpenseCreate",
    "ExpenseRead",
    "MeResponse",
    "PasswordResetResponse",
    "PaymentCreate",
    "PaymentRead",
    "PublicCompanyInfo",
    "ReminderRead",
    "StaffCreate",
    "StaffCreateResponse",
    "StaffLoginRequest",
    "StaffRead",
    "StaffUpdate",
    "UserSession",
]
