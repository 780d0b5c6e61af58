# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

import pytest
from consolectl.http_client import SchemaValidationError
from webconsole.models.schema import (
    DeviceGroup,
    Gnb,
    K4Key,
    NetworkSlice,
    Subscriber,
    Upf,
    parse_document,
)


def test_device_group_from_wire_document():
    """Test parsing a device group with hyphenated wire names"""
    group = parse_document(DeviceGroup, {
        "group-name": "iot-cameras",
        "imsis": ["208930100007487"],
        "site-info": "site-1",
        "ip-domain-name": "pool1",
        "ip-domain-expanded": {
            "dnn": "internet",
            "ue-ip-pool": "172.250.0.0/16",
            "mtu": 1460,
            "ue-dnn-qos": {
                "dnn-mbr-uplink": 100,
                "bitrate-unit": "Mbps",
                "traffic-class": {"name": "platinum", "qci": 9},
            },
        },
    })

    assert group.group_name == "iot-cameras"
    assert group.ip_domain_expanded.ue_ip_pool == "172.250.0.0/16"
    assert group.ip_domain_expanded.ue_dnn_qos.traffic_class.qci == 9


def test_device_group_null_imsis():
    """Test backend null IMSI list becomes empty list"""
    group = parse_document(DeviceGroup, {"group-name": "empty", "imsis": None})
    assert group.imsis == []


def test_device_group_round_trips_wire_names_and_unknown_fields():
    """Test to_document keeps wire names and unknown fields, drops unset optionals"""
    raw = {"group-name": "g1", "imsis": [], "custom-field": "kept"}
    document = parse_document(DeviceGroup, raw).to_document()

    assert document["group-name"] == "g1"
    assert document["custom-field"] == "kept"
    assert "site-info" not in document


def test_device_group_requires_name():
    """Test missing identity is a schema error"""
    with pytest.raises(SchemaValidationError):
        parse_document(DeviceGroup, {"imsis": []})


def test_parse_document_rejects_non_object():
    """Test non-object JSON is rejected"""
    with pytest.raises(SchemaValidationError, match="Expected Gnb object, got list"):
        parse_document(Gnb, ["gnb-1"])


def test_network_slice_nested_site_info():
    """Test network slice parsing with numeric SST and null collections"""
    network_slice = parse_document(NetworkSlice, {
        "slice-name": "slice-1",
        "slice-id": {"sst": 1, "sd": "010203"},
        "site-device-group": None,
        "site-info": {
            "site-name": "site-1",
            "plmn": {"mcc": "208", "mnc": "93"},
            "gNodeBs": [{"name": "gnb-1", "tac": 1}],
            "upf": None,
        },
        "application-filtering-rules": None,
    })

    assert network_slice.slice_id.sst == "1"
    assert network_slice.site_device_group == []
    assert network_slice.site_info.gnodebs[0].tac == 1
    assert network_slice.site_info.upf == {}
    assert network_slice.application_filtering_rules == []


def test_gnb_accepts_gnb_name_alias():
    """Test gNB documents using gnbName are normalized to name"""
    gnb = parse_document(Gnb, {"gnbName": "gnb-7", "tac": ""})
    assert gnb.name == "gnb-7"
    assert gnb.tac is None
    assert gnb.to_document() == {"name": "gnb-7"}


def test_upf_port_stringified():
    """Test numeric UPF port is kept as string"""
    upf = parse_document(Upf, {"hostname": "upf-1", "port": 8805})
    assert upf.port == "8805"


def test_k4_key_sno_range():
    """Test K4 SNO outside 0-255 is rejected"""
    with pytest.raises(SchemaValidationError):
        parse_document(K4Key, {"k4_sno": 256, "k4": "aa"})


def test_k4_key_null_value():
    """Test null K4 value becomes empty string"""
    key = parse_document(K4Key, {"k4_sno": 1, "k4": None, "key_label": "K4_AES"})
    assert key.k4 == ""


def test_subscriber_full_document():
    """Test subscriber parsing keeps authentication subscription"""
    subscriber = parse_document(Subscriber, {
        "ueId": "imsi-208930100007487",
        "plmnID": "20893",
        "AuthenticationSubscription": {"SequenceNumber": "16f3b3f70fc2"},
    })
    assert subscriber.ue_id == "imsi-208930100007487"
    assert subscriber.authentication_subscription["SequenceNumber"] == "16f3b3f70fc2"
