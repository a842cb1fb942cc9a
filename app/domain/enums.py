"""Enumerations shared by the ORM models, the domain and the API schemas."""

from enum import Enum


class AccessState(str, Enum):
    OPEN = "open"
    RESTRICTED = "restricted"
    CLOSED = "closed"


class BasisAccessState(str, Enum):
    AUTHOR_RIGHT_EXCEPTION = "authorRightException"
    LICENCE_CONTRACT = "licenceContract"
    LICENCE_CONTRACT_OA = "licenceContractOa"
    OPEN_CONTENT_LICENCE = "openContentLicence"
    USER_AGREEMENT = "userAgreement"
    ZBW_POLICY = "zbwPolicy"


class BasisStorage(str, Enum):
    AUTHOR_RIGHT_EXCEPTION = "authorRightException"
    LICENCE_CONTRACT = "licenceContract"
    OPEN_CONTENT_LICENCE = "openContentLicence"
    USER_AGREEMENT = "userAgreement"
    ZBW_POLICY_RESTRICTED = "zbwPolicyRestricted"
    ZBW_POLICY_UNANSWERED = "zbwPolicyUnanswered"


class PublicationType(str, Enum):
    ARTICLE = "article"
    BOOK = "book"
    BOOK_PART = "bookPart"
    CONFERENCE_PAPER = "conferencePaper"
    PERIODICAL_PART = "periodicalPart"
    PROCEEDINGS = "proceedings"
    RESEARCH_REPORT = "researchReport"
    THESIS = "thesis"
    WORKING_PAPER = "workingPaper"


class TemporalValidity(str, Enum):
    FUTURE = "future"
    PAST = "past"
    PRESENT = "present"


class FormalRule(str, Enum):
    LICENCE_CONTRACT = "licenceContract"
    OPEN_CONTENT_LICENCE = "openContentLicence"
    ZBW_USER_AGREEMENT = "zbwUserAgreement"


class ConflictType(str, Enum):
    DATE_OVERLAP = "dateOverlap"
