from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""OutputRecord: the fixed nested shape handed to the downstream system.

Field names in ``to_dict()`` are part of the external contract and must not
change. Source values that are absent stay ``None`` (serialized as null).
"""

__all__ = [
    "ExternalEntityIdentifier",
    "LicenseDetails",
    "ContactDetails",
    "Address",
    "Communication",
    "OutputRecord",
]


@dataclass(frozen=True)
class ExternalEntityIdentifier:
    value: str | None
    code: str = "ENTITY ID"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "value": self.value}


@dataclass(frozen=True)
class LicenseDetails:
    license_type: str | None
    license_number: str | None
    effective_date: str | None
    expiration_date: str | None
    qualification: str | None
    qualification_effective_date: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "LicenseType": self.license_type,
            "LicenseNumber": self.license_number,
            "EffectiveDate": self.effective_date,
            "ExpirationDate": self.expiration_date,
            "Qualification": self.qualification,
            "QualificationEffectiveDate": self.qualification_effective_date,
        }


@dataclass(frozen=True)
class ContactDetails:
    """Phone numbers, email addresses and contact preference flags.

    All email slots carry the same address; the send flags are always off
    and the preferred contact type is email ("E").
    """
    home_phone: str | None
    business_phone: str | None
    mobile_phone: str | None
    email: str | None
    fax: str = ""
    send_sms: bool = False
    send_quote_email: bool = False
    send_policy_email: bool = False
    preferred_contact_type: str = "E"

    def to_dict(self) -> dict[str, Any]:
        return {
            "HomePhone": self.home_phone,
            "BusinessPhone": self.business_phone,
            "Fax": self.fax,
            "MobilePhone": self.mobile_phone,
            "SendSms": self.send_sms,
            "EmailId": self.email,
            "SendQuoteEmail": self.send_quote_email,
            "QuoteEmailId": self.email,
            "SendPolicyEmail": self.send_policy_email,
            "PolicyEmailId": self.email,
            "FromEmailId": self.email,
            "EmailCCId": self.email,
            "PreferedContactType": self.preferred_contact_type,
            "SecondaryEmailId": self.email,
        }


@dataclass(frozen=True)
class Address:
    """Mostly-empty structured address; only the street and raw text are filled."""
    street_name: str | None
    unformatted_address: str | None
    country: str = "US"
    country_code: str = "US"
    address_type: str = "M"  # mailing

    def to_dict(self) -> dict[str, Any]:
        return {
            "IsManual": None,
            "StreetName": self.street_name,
            "AddressLine1": None,
            "AddressLine2": None,
            "City": "",
            "State": "",
            "County": "",
            "CountyCode": None,
            "Zip": "",
            "Country": self.country,
            "CountryCode": self.country_code,
            "PlaceId": None,
            "Number": None,
            "Name": None,
            "Long": None,
            "Lat": None,
            "Description": None,
            "AddressType": self.address_type,
            "FormattedAddress": None,
            "UnFormattedAddress": self.unformatted_address,
            "Status": None,
            "AptSuite": None,
            "PoBox": None,
            "CityCode": None,
            "Territory": None,
            "TerritoryCode": None,
        }


@dataclass(frozen=True)
class Communication:
    type: str  # PhNo / Email
    value: str | None
    subtype: str = "Primary"
    status: str = "Active"

    def to_dict(self) -> dict[str, Any]:
        return {
            "Type": self.type,
            "SubType": self.subtype,
            "Value": self.value,
            "Status": self.status,
        }


@dataclass(frozen=True)
class OutputRecord:
    partition_key: str
    client: str
    name: str | None
    products: tuple[str, ...]
    external_id: ExternalEntityIdentifier
    npn: str | None
    license: LicenseDetails
    contact: ContactDetails
    address: Address
    communications: tuple[Communication, ...]
    code: str = ""
    status: str = "Active"
    references: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "PartitionKey": self.partition_key,
            "Client": self.client,
            "Code": self.code,
            "Name": self.name,
            "Status": self.status,
            "Products": list(self.products),
            "References": list(self.references),
            "ExternalEntityIdentifier": self.external_id.to_dict(),
            "NPN": self.npn,
            "LicenseDetails": self.license.to_dict(),
            "ContactDetails": self.contact.to_dict(),
            "Address": self.address.to_dict(),
            "Communications": [c.to_dict() for c in self.communications],
        }
