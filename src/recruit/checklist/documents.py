"""Background investigation document catalogue."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    id: str
    title: str
    description: str
    category: str
    required: bool
    time_to_obtain: str
    cost: str


DOCUMENTS: list[Document] = [
    Document(
        "birth-certificate", "Certified Birth Certificate",
        "Official certified copy of your birth certificate", "Identity", True, "1-3 weeks", "$15-30",
    ),
    Document(
        "social-security-card", "Social Security Card",
        "Copy of your Social Security card", "Identity", True, "1-2 weeks", "Free",
    ),
    Document(
        "drivers-license", "California Driver's License",
        "Copy of current California driver's license", "Identity", True, "Same day", "None for copy",
    ),
    Document(
        "passport", "U.S. Passport",
        "Copy of current U.S. passport", "Identity", True, "Same day (if you have one)", "None for copy",
    ),
    Document(
        "selective-service", "Selective Service Registration",
        "Proof of registration with Selective Service (males only)", "Military", True, "Instant online", "Free",
    ),
    Document(
        "high-school-transcript", "High School Transcript (Sealed)",
        "Official sealed transcript from high school", "Education", True, "2-4 weeks", "$5-15",
    ),
    Document(
        "college-transcript", "College Transcripts (Sealed)",
        "Official sealed transcripts from all colleges attended", "Education", True, "2-4 weeks",
        "$5-20 per school",
    ),
    Document(
        "dd214", "Military Discharge (DD214)",
        "Copy of DD214 showing character of service (Veterans only)", "Military", True, "2-8 weeks", "Free",
    ),
    Document(
        "marriage-certificate", "Marriage Certificate",
        "Certified copy of marriage certificate (if applicable)", "Personal", False, "1-3 weeks", "$10-25",
    ),
    Document(
        "divorce-decree", "Divorce Decree",
        "Copy of final divorce decree (if applicable)", "Personal", False, "1-2 weeks", "$10-25",
    ),
    Document(
        "vehicle-insurance", "Vehicle Insurance Declaration",
        "Declaration page from current auto insurance policy", "Financial", False, "Same day", "Free",
    ),
    Document(
        "vehicle-registration", "Vehicle Registration",
        "Copy of current vehicle registration (if applicable)", "Financial", False, "Same day", "Free",
    ),
    Document(
        "restraining-orders", "Restraining Orders",
        "Copies of any restraining orders issued or filed (if applicable)", "Legal", False, "1-2 weeks",
        "$10-20",
    ),
    Document(
        "bankruptcy-records", "Bankruptcy Records",
        "Copies of bankruptcy proceedings (if applicable)", "Financial", False, "1-3 weeks", "$15-30",
    ),
    Document(
        "covid-vaccination", "COVID-19 Vaccination Record",
        "Copy of current COVID-19 vaccination record", "Medical", True, "Same day", "Free",
    ),
    Document(
        "passport-photo", "Passport-Style Photo",
        "Recent 2x2 color photograph (passport size)", "Identity", True, "Same day", "$10-15",
    ),
    Document(
        "employment-authorization", "Employment Authorization",
        "Proof of right to work in the United States", "Identity", True, "Varies", "Varies",
    ),
    Document(
        "criminal-records", "Criminal Records",
        "Complete records of any arrests, charges, or convictions", "Legal", True, "1-4 weeks", "$10-50",
    ),
    Document(
        "driving-records", "Driving Records (MVR)",
        "Complete motor vehicle records including tickets, suspensions, DUI", "Legal", True, "1-2 weeks",
        "$5-25",
    ),
    Document(
        "court-documents", "Court Documents",
        "Any civil lawsuits, judgments, or court proceedings", "Legal", False, "1-3 weeks", "$10-30",
    ),
]

DOCUMENTS_BY_ID: dict[str, Document] = {d.id: d for d in DOCUMENTS}
ALL_DOCUMENT_IDS: frozenset[str] = frozenset(DOCUMENTS_BY_ID)
REQUIRED_DOCUMENT_IDS: frozenset[str] = frozenset(d.id for d in DOCUMENTS if d.required)
