# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

import pytest
from consolectl.http_client import APIResponseError
from webconsole.core.managers.subscriber import ListState, SubscriberListManager

LIST_URL = "http://webui.test/api/subscriber"


@pytest.fixture
def manager(mock_client):
    return SubscriberListManager(mock_client)


def _form(**overrides):
    data = {
        "sub_ueId": "imsi-208930100007487",
        "sub_plmnID": "20893",
        "sub_key": "5122250214c33e723a5dd523fc145fc0",
        "sub_opc": "981d464c7c52eb6e5036234984ad0bcf",
        "sub_sequenceNumber": "16f3b3f70fc2",
        "sub_k4_sno": None,
        "sub_encryptionAlgorithm": None,
    }
    data.update(overrides)
    return data


def test_list_state_params():
    """Test only non-empty filters are sent"""
    assert ListState().to_params() == {"page": "1", "limit": "20"}
    state = ListState(page=2, limit=50, q="2089", plmnID="20893")
    assert state.to_params() == {"page": "2", "limit": "50", "plmnID": "20893", "q": "2089"}


def test_paginated_response(mock_client, manager):
    mock_client.get_json.return_value = {
        "items": [{"ueId": "imsi-1", "plmnID": "20893"}, {"plmnID": "missing-ue"}],
        "page": 2,
        "limit": 1,
        "total": 5,
        "pages": 5,
    }

    data = manager.load_data()

    assert data == [{"ueId": "imsi-1", "plmnID": "20893"}]
    assert manager.list_meta.model_dump() == {"page": 2, "limit": 1, "total": 5, "pages": 5}
    assert "**Page:** 2 of 5" in manager.view


def test_legacy_array_response(mock_client, manager):
    """Test a plain array is treated as a single page"""
    mock_client.get_json.return_value = [{"ueId": "imsi-1"}, {"ueId": "imsi-2"}]

    data = manager.load_data()

    assert len(data) == 2
    assert manager.list_meta.model_dump() == {"page": 1, "limit": 2, "total": 2, "pages": 1}


def test_load_error(mock_client, manager):
    mock_client.get_json.side_effect = APIResponseError(503, "HTTP 503: Service Unavailable")
    assert manager.load_data() == []
    assert manager.error == "Failed to load subscribers: HTTP 503: Service Unavailable"


def test_empty_list_view(mock_client, manager):
    mock_client.get_json.return_value = {"items": [], "total": 0, "pages": 0}
    manager.load_data()
    assert "No subscribers found" in manager.view


def test_paging_sends_state(mock_client, manager):
    mock_client.get_json.return_value = {"items": [], "page": 1, "limit": 20, "total": 40, "pages": 2}
    manager.load_data()

    manager.next_page()

    mock_client.get_json.assert_called_with(LIST_URL, params={"page": "2", "limit": "20"})


def test_previous_page_never_below_one(mock_client, manager):
    mock_client.get_json.return_value = {"items": [], "page": 1}
    manager.load_data()
    manager.previous_page()
    assert manager.list_state.page == 1


def test_apply_list_controls_resets_page(mock_client, manager):
    """Test filters restart at page 1 and an invalid limit keeps the old one"""
    mock_client.get_json.return_value = {"items": []}
    manager.set_list_state(page=4)

    manager.apply_list_controls(q=" 2089 ", ue_id="", plmn_id="20893", limit="abc")

    assert manager.list_state.page == 1
    assert manager.list_state.limit == 20
    mock_client.get_json.assert_called_with(
        LIST_URL, params={"page": "1", "limit": "20", "plmnID": "20893", "q": "2089"}
    )


def test_clear_list_controls(mock_client, manager):
    mock_client.get_json.return_value = {"items": []}
    manager.set_list_state(q="x", ueId="y", plmnID="z", page=3, limit=50)

    manager.clear_list_controls()

    assert manager.list_state == ListState(limit=50)


def test_validation_messages(manager):
    result = manager.validate_form_data(_form(
        sub_ueId="", sub_plmnID="2089", sub_key="zz", sub_opc="", sub_sequenceNumber=""
    ))
    assert result.errors == [
        "UE ID is required",
        "PLMN ID must be 5 or 6 digits",
        "Key (Ki) must contain only hexadecimal characters",
        "OPc must contain only hexadecimal characters",
        "Sequence Number is required",
    ]


def test_payload(manager):
    payload = manager.prepare_payload(_form(sub_k4_sno="3", sub_encryptionAlgorithm="1"))
    assert payload == {
        "ueId": "imsi-208930100007487",
        "plmnID": "20893",
        "OPc": "981d464c7c52eb6e5036234984ad0bcf",
        "Key": "5122250214c33e723a5dd523fc145fc0",
        "SequenceNumber": "16f3b3f70fc2",
        "EncryptionAlgorithm": 1,
        "k4_sno": 3,
    }


def test_payload_defaults(manager):
    """Test encryption algorithm defaults to 0 and k4_sno is optional"""
    payload = manager.prepare_payload(_form())
    assert payload["EncryptionAlgorithm"] == 0
    assert "k4_sno" not in payload


def test_create_posts_to_ue_id(mock_client, manager):
    manager.create_item(manager.prepare_payload(_form()))
    assert mock_client.send_json.call_args[0][:2] == (
        "POST", "http://webui.test/api/subscriber/imsi-208930100007487"
    )


def test_get_item_fills_ue_id(mock_client, manager):
    mock_client.get_json.return_value = {"plmnID": "20893"}
    document = manager.get_item("imsi-1")
    assert document["ueId"] == "imsi-1"


def test_form_values_from_full_document(manager):
    values = manager.to_form_values({
        "ueId": "imsi-1",
        "plmnID": "20893",
        "AuthenticationSubscription": {
            "PermanentKey": {"PermanentKeyValue": "aa"},
            "Opc": {"OpcValue": "bb", "EncryptionAlgorithm": 2},
            "SequenceNumber": "16f3b3f70fc2",
        },
    })
    assert values["sub_key"] == "aa"
    assert values["sub_opc"] == "bb"
    assert values["sub_sequenceNumber"] == "16f3b3f70fc2"
    assert values["sub_encryptionAlgorithm"] == 2


def test_k4_options(mock_client, manager):
    """Test the K4 SNO select lists keys with a preview"""
    mock_client.get_json.return_value = [{"k4_sno": 1, "k4": "00112233445566778899"}, {"k4": "x"}]

    manager.prepare_create_form()

    mock_client.get_json.assert_called_once_with("http://webui.test/api/k4opt")
    field = {f.id: f for f in manager.get_form_fields()}["sub_k4_sno"]
    assert field.options == [("", "None (Optional)"), ("1", "SNO 1 - Key: 00112233...")]


def test_k4_options_failure(mock_client, manager):
    mock_client.get_json.side_effect = APIResponseError(500, "HTTP 500: Internal Server Error")
    assert manager.load_k4_keys() == []


def test_next_page_stops_at_last_page(mock_client, manager):
    mock_client.get_json.return_value = {"items": [], "page": 2, "limit": 20, "total": 40, "pages": 2}
    manager.go_to_page(2)

    manager.next_page()

    mock_client.get_json.assert_called_with(LIST_URL, params={"page": "2", "limit": "20"})
    assert manager.list_state.page == 2


def test_non_ascii_plmn_id_rejected(manager):
    result = manager.validate_form_data(_form(sub_plmnID="٢٠٨٩٣"))
    assert result.errors == ["PLMN ID must be 5 or 6 digits"]


def test_payload_strips_padded_values(manager):
    """Test padded credentials that pass validation are sent trimmed"""
    form = _form(
        sub_ueId=" imsi-208930100007487 ",
        sub_plmnID="20893 ",
        sub_key="5122250214c33e723a5dd523fc145fc0 ",
        sub_opc=" 981d464c7c52eb6e5036234984ad0bcf",
        sub_sequenceNumber=" 16f3b3f70fc2 ",
    )
    assert manager.validate_form_data(form).is_valid is True

    payload = manager.prepare_payload(form)

    assert payload["ueId"] == "imsi-208930100007487"
    assert payload["plmnID"] == "20893"
    assert payload["Key"] == "5122250214c33e723a5dd523fc145fc0"
    assert payload["OPc"] == "981d464c7c52eb6e5036234984ad0bcf"
    assert payload["SequenceNumber"] == "16f3b3f70fc2"
