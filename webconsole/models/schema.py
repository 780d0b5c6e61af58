# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Pydantic models for the configuration documents exchanged with the config API"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from consolectl.http_client import SchemaValidationError


class ConsoleDocument(BaseModel):
    """Base for wire documents: hyphenated aliases, unknown fields kept"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> Dict[str, Any]:
        """Dump with wire field names, dropping unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True)


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


def _number_to_str(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# ============================================================================
# Device Group
# ============================================================================

class TrafficClass(ConsoleDocument):
    """QoS traffic class"""

    name: Optional[str] = None
    qci: Optional[int] = None
    arp: Optional[int] = None
    pdb: Optional[int] = None
    pelr: Optional[int] = None


class UeDnnQos(ConsoleDocument):
    """Per-DNN UE bitrate limits"""

    dnn_mbr_uplink: Optional[int] = Field(default=None, alias="dnn-mbr-uplink")
    dnn_mbr_downlink: Optional[int] = Field(default=None, alias="dnn-mbr-downlink")
    bitrate_unit: Optional[str] = Field(default=None, alias="bitrate-unit")
    traffic_class: Optional[TrafficClass] = Field(default=None, alias="traffic-class")


class IpDomainExpanded(ConsoleDocument):
    """UE IP domain configuration"""

    dnn: Optional[str] = None
    ue_ip_pool: Optional[str] = Field(default=None, alias="ue-ip-pool")
    dns_primary: Optional[str] = Field(default=None, alias="dns-primary")
    dns_secondary: Optional[str] = Field(default=None, alias="dns-secondary")
    mtu: Optional[int] = None
    ue_dnn_qos: Optional[UeDnnQos] = Field(default=None, alias="ue-dnn-qos")


class DeviceGroup(ConsoleDocument):
    """Group of subscribers sharing an IP domain"""

    group_name: str = Field(..., alias="group-name", min_length=1)
    imsis: List[str] = Field(default_factory=list)
    site_info: Optional[str] = Field(default=None, alias="site-info")
    ip_domain_name: Optional[str] = Field(default=None, alias="ip-domain-name")
    ip_domain_expanded: Optional[IpDomainExpanded] = Field(default=None, alias="ip-domain-expanded")

    @field_validator("imsis", mode="before")
    @classmethod
    def null_imsis(cls, v: Any) -> Any:
        """Backend sends null for an empty IMSI list"""
        return [] if v is None else v


# ============================================================================
# Network Slice
# ============================================================================

class SliceId(ConsoleDocument):
    """S-NSSAI"""

    sst: Optional[str] = None
    sd: Optional[str] = None

    @field_validator("sst", "sd", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        return _number_to_str(v)


class Plmn(ConsoleDocument):
    mcc: Optional[str] = None
    mnc: Optional[str] = None


class GNodeB(ConsoleDocument):
    """gNodeB attached to a slice site"""

    name: Optional[str] = None
    tac: Optional[int] = None

    @field_validator("tac", mode="before")
    @classmethod
    def blank_tac(cls, v: Any) -> Any:
        return _blank_to_none(v)


class SiteInfo(ConsoleDocument):
    """Slice site: PLMN, radios and UPF"""

    site_name: Optional[str] = Field(default=None, alias="site-name")
    plmn: Optional[Plmn] = None
    gnodebs: List[GNodeB] = Field(default_factory=list, alias="gNodeBs")
    upf: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("gnodebs", "upf", mode="before")
    @classmethod
    def null_collections(cls, v: Any, info) -> Any:
        if v is None:
            return [] if info.field_name == "gnodebs" else {}
        return v


class ApplicationFilteringRule(ConsoleDocument):
    """Slice application filtering rule"""

    rule_name: str = Field(..., alias="rule-name")
    priority: int = 0
    action: Optional[str] = None
    endpoint: Optional[str] = None
    protocol: int = 0
    dest_port_start: int = Field(default=0, alias="dest-port-start")
    dest_port_end: int = Field(default=65535, alias="dest-port-end")
    rule_trigger: Optional[str] = Field(default=None, alias="rule-trigger")
    app_mbr_uplink: Optional[int] = Field(default=None, alias="app-mbr-uplink")
    app_mbr_downlink: Optional[int] = Field(default=None, alias="app-mbr-downlink")
    bitrate_unit: Optional[str] = Field(default=None, alias="bitrate-unit")
    traffic_class: Optional[TrafficClass] = Field(default=None, alias="traffic-class")


class NetworkSlice(ConsoleDocument):
    """5G network slice"""

    slice_name: str = Field(..., alias="slice-name", min_length=1)
    slice_id: Optional[SliceId] = Field(default=None, alias="slice-id")
    site_device_group: List[str] = Field(default_factory=list, alias="site-device-group")
    site_info: Optional[SiteInfo] = Field(default=None, alias="site-info")
    application_filtering_rules: List[ApplicationFilteringRule] = Field(
        default_factory=list,
        alias="application-filtering-rules"
    )

    @field_validator("site_device_group", "application_filtering_rules", mode="before")
    @classmethod
    def null_lists(cls, v: Any) -> Any:
        return [] if v is None else v


# ============================================================================
# Inventory
# ============================================================================

class Gnb(ConsoleDocument):
    """gNB inventory entry"""

    name: str = Field(
        ...,
        validation_alias=AliasChoices("name", "gnbName"),
        serialization_alias="name"
    )
    tac: Optional[int] = None

    @field_validator("tac", mode="before")
    @classmethod
    def blank_tac(cls, v: Any) -> Any:
        return _blank_to_none(v)


class Upf(ConsoleDocument):
    """UPF inventory entry"""

    hostname: str
    port: Optional[str] = None

    @field_validator("port", mode="before")
    @classmethod
    def stringify_port(cls, v: Any) -> Any:
        return _number_to_str(v)


# ============================================================================
# Subscriber provisioning
# ============================================================================

class K4Key(ConsoleDocument):
    """K4 transport key"""

    k4_sno: int = Field(..., ge=0, le=255)
    k4: str = ""
    key_label: Optional[str] = None
    key_type: Optional[str] = None
    time_created: Optional[str] = None
    time_updated: Optional[str] = None

    @field_validator("k4", mode="before")
    @classmethod
    def null_key(cls, v: Any) -> Any:
        return "" if v is None else v


class SubscriberSummary(ConsoleDocument):
    """Subscriber list entry"""

    ue_id: str = Field(..., alias="ueId")
    plmn_id: Optional[str] = Field(default=None, alias="plmnID")


class Subscriber(ConsoleDocument):
    """Subscriber provisioning data (override data on write, full data on read)"""

    ue_id: str = Field(..., alias="ueId")
    plmn_id: Optional[str] = Field(default=None, alias="plmnID")
    key: Optional[str] = Field(default=None, alias="Key")
    opc: Optional[str] = Field(default=None, alias="OPc")
    sequence_number: Optional[str] = Field(default=None, alias="SequenceNumber")
    encryption_algorithm: Optional[int] = Field(default=None, alias="EncryptionAlgorithm")
    k4_sno: Optional[int] = None
    authentication_subscription: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="AuthenticationSubscription"
    )


DocumentT = TypeVar("DocumentT", bound=ConsoleDocument)


def parse_document(model: Type[DocumentT], raw: Any) -> DocumentT:
    """
    Build a typed document from a decoded JSON value.

    Args:
        model: Document class to validate against
        raw: Decoded JSON (must be an object)

    Returns:
        Validated document instance

    Raises:
        SchemaValidationError: If the value does not match the schema
    """
    if not isinstance(raw, dict):
        raise SchemaValidationError(
            f"Expected {model.__name__} object, got {type(raw).__name__}"
        )
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise SchemaValidationError(f"Invalid {model.__name__} document: {e}") from e
