"""Tests for the scheduling state codec."""

import json
import logging

from workload_pipeline.workload.constants import STATE_ANNOTATION
from workload_pipeline.workload.memory import StaticNodeResolver
from workload_pipeline.workload.scheduling import (
    decode_state,
    encode_state,
    set_scheduling,
    state_key,
)


def _pinned(node_id):
    return {"name": "web", "scheduling": {"node": {"nodeId": node_id}}}


class TestStateCodec:
    """Tests for decode_state() / encode_state()."""

    def test_state_key_is_urlsafe_base64(self):
        """Test the state key encoding."""
        assert state_key("node-1") == "bm9kZS0x"

    def test_decode_missing(self):
        """Test decoding a document without annotation."""
        assert decode_state({"name": "web"}) == {}

    def test_decode_malformed(self):
        """Test that malformed JSON decodes to an empty mapping."""
        doc = {"annotations": {STATE_ANNOTATION: "{not json"}}

        assert decode_state(doc) == {}

    def test_decode_deeply_nested(self):
        """Test that JSON nested past the parser limit decodes to an empty mapping."""
        doc = {"annotations": {STATE_ANNOTATION: "[" * 200000 + "]" * 200000}}

        assert decode_state(doc) == {}

    def test_decode_non_object(self):
        """Test that a non-object JSON value decodes to an empty mapping."""
        doc = {"annotations": {STATE_ANNOTATION: "[1, 2]"}}

        assert decode_state(doc) == {}

    def test_encode_then_decode(self):
        """Test that an encoded state decodes unchanged."""
        doc = {}
        encode_state(doc, {"bm9kZS0x": "c-abc:m-1"})

        assert json.loads(doc["annotations"][STATE_ANNOTATION]) == {"bm9kZS0x": "c-abc:m-1"}
        assert decode_state(doc) == {"bm9kZS0x": "c-abc:m-1"}

    def test_encode_keeps_other_annotations(self):
        """Test that other annotations are preserved."""
        doc = {"annotations": {"team": "payments"}}
        encode_state(doc, {})

        assert doc["annotations"] == {"team": "payments", STATE_ANNOTATION: "{}"}

    def test_encode_unserializable_value(self, caplog):
        """Test that a state JSON cannot encode is logged and not written."""
        doc = {"id": "deployment-ns-web", "annotations": {STATE_ANNOTATION: "{}"}}

        with caplog.at_level(logging.ERROR):
            encode_state(doc, {"bm9kZS0x": object()})

        assert doc["annotations"][STATE_ANNOTATION] == "{}"
        assert "Failed to save state on workload deployment-ns-web" in caplog.text


class TestSetScheduling:
    """Tests for set_scheduling()."""

    def test_pin_resolved_and_recorded(self):
        """Test rewriting a pin to the node name and recording it."""
        doc = _pinned("c-abc:m-1")

        set_scheduling(StaticNodeResolver({"c-abc:m-1": "node-1"}), doc)

        assert doc["scheduling"]["node"]["nodeId"] == "node-1"
        assert decode_state(doc) == {state_key("node-1"): "c-abc:m-1"}

    def test_existing_state_preserved(self):
        """Test that earlier pins stay in the state."""
        doc = _pinned("c-abc:m-2")
        encode_state(doc, {state_key("node-1"): "c-abc:m-1"})

        set_scheduling(StaticNodeResolver({"c-abc:m-2": "node-2"}), doc)

        assert decode_state(doc) == {
            state_key("node-1"): "c-abc:m-1",
            state_key("node-2"): "c-abc:m-2",
        }

    def test_malformed_state_replaced(self):
        """Test that a malformed state is replaced on the next pin."""
        doc = _pinned("c-abc:m-1")
        doc["annotations"] = {STATE_ANNOTATION: "garbage"}

        set_scheduling(StaticNodeResolver({"c-abc:m-1": "node-1"}), doc)

        assert decode_state(doc) == {state_key("node-1"): "c-abc:m-1"}

    def test_deeply_nested_state_replaced(self):
        """Test that a state nested past the parser limit is replaced on the next pin."""
        doc = _pinned("c-abc:m-1")
        doc["annotations"] = {STATE_ANNOTATION: "[" * 200000}

        set_scheduling(StaticNodeResolver({"c-abc:m-1": "node-1"}), doc)

        assert decode_state(doc) == {state_key("node-1"): "c-abc:m-1"}

    def test_no_pin_clears_node_id(self):
        """Test that the top-level nodeId is cleared without a pin."""
        doc = {"name": "web", "nodeId": "node-1"}

        set_scheduling(StaticNodeResolver(), doc)

        assert doc["nodeId"] == ""
        assert "annotations" not in doc

    def test_unresolvable_pin_left_alone(self):
        """Test that an unresolvable pin is left as submitted."""
        doc = _pinned("c-abc:m-404")

        set_scheduling(StaticNodeResolver(), doc)

        assert doc["scheduling"]["node"]["nodeId"] == "c-abc:m-404"
        assert "annotations" not in doc
