"""
Tests for column (de)serialization at the store boundary.
"""
import json
from datetime import date, datetime, timedelta, timezone

import pytest
from structlog.testing import capture_logs

from gatehouse.db.serialization import (
    deserialize_array,
    deserialize_bool,
    deserialize_date,
    deserialize_datetime,
    deserialize_object,
    serialize_array,
    serialize_bool,
    serialize_date,
    serialize_datetime,
    serialize_object,
)
from gatehouse.models.risk_assessment import RiskAssessment
from gatehouse.models.staff import DomesticStaffProfile
from gatehouse.schemas.enums import RiskLevel, ServiceType
from gatehouse.schemas.risk_decision import Explanation
from gatehouse.schemas.risk_signals import Anomaly


class TestJsonColumns:

    def test_unit_list(self):
        units = ["A-101", "B-204", "ALL"]
        assert deserialize_array(serialize_array(units)) == units

    def test_schedule_object(self):
        schedule = {"monday": {"start": "09:00", "end": "17:00"}, "sat": {"start": "22:00", "end": "06:00"}}
        assert deserialize_object(serialize_object(schedule)) == schedule

    def test_anomaly_list(self):
        anomalies = [Anomaly(type="late_night", severity=RiskLevel.HIGH, confidence=0.9)]
        raw = serialize_array([a.model_dump() for a in anomalies])
        restored = [Anomaly.model_validate(a) for a in deserialize_array(raw)]
        assert restored == anomalies

    @pytest.mark.parametrize("corrupt", ["[1, 2", "{not json", "nul", "\x00\x01"])
    def test_corrupt_text_gives_empty_containers(self, corrupt):
        assert deserialize_array(corrupt) == []
        assert deserialize_object(corrupt) == {}

    def test_wrong_shape_gives_empty_container(self):
        assert deserialize_array('{"a": 1}') == []
        assert deserialize_object("[1, 2]") == {}

    def test_null_and_empty(self):
        assert deserialize_array(None) == []
        assert deserialize_object("") == {}


class TestTimestamps:

    def test_round_trip_utc(self):
        moment = datetime(2026, 3, 1, 18, 30, 5, tzinfo=timezone.utc)
        assert deserialize_datetime(serialize_datetime(moment)) == moment

    def test_offset_normalized_to_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        text = serialize_datetime(datetime(2026, 3, 2, 0, 0, tzinfo=ist))
        assert text.startswith("2026-03-01T18:30:00")

    def test_naive_taken_as_utc(self):
        parsed = deserialize_datetime("2026-03-01 18:30:00")
        assert parsed == datetime(2026, 3, 1, 18, 30, tzinfo=timezone.utc)

    def test_z_suffix(self):
        assert deserialize_datetime("2026-03-01T18:30:00Z").tzinfo is not None

    def test_unparseable(self):
        assert deserialize_datetime("yesterday-ish") is None
        assert deserialize_date("31/02/2026") is None

    def test_dates(self):
        assert serialize_date(date(2026, 1, 31)) == "2026-01-31"
        assert deserialize_date("2026-01-31") == date(2026, 1, 31)


class TestBooleans:

    def test_encode(self):
        assert serialize_bool(True) == 1
        assert serialize_bool(False) == 0

    @pytest.mark.parametrize("raw,expected", [(1, True), (0, False), ("1", True), ("0", False), (None, False)])
    def test_decode(self, raw, expected):
        assert deserialize_bool(raw) is expected


class TestEntityRows:

    def test_staff_row_round_trip(self):
        profile = DomesticStaffProfile(
            name="Lakshmi Devi",
            phone_number="+919800000001",
            service_type=ServiceType.MAID,
            authorized_units=["A-101"],
            work_schedule={"monday": {"start": "09:00", "end": "17:00"}},
            access_code="STAFF-1",
        )
        row = profile.to_row()

        assert row["authorized_units"] == '["A-101"]'
        assert row["active"] == 1
        assert row["service_type"] == "MAID"
        assert row["end_date"] is None
        assert DomesticStaffProfile.from_row(row).model_dump() == profile.model_dump()

    def test_corrupt_json_column_falls_back(self):
        row = DomesticStaffProfile(
            name="x", phone_number="1", service_type=ServiceType.COOK, access_code="C-1",
        ).to_row()
        row["authorized_units"] = "[broken"
        row["work_schedule"] = "{broken"

        restored = DomesticStaffProfile.from_row(row)
        assert restored.authorized_units == []
        assert restored.work_schedule == {}

    def test_assessment_nested_json(self):
        assessment = RiskAssessment(
            visitor_id="v-1",
            risk_score=69.0,
            risk_level=RiskLevel.HIGH,
            anomalies=[Anomaly(type="t", severity=RiskLevel.CRITICAL, confidence=0.4)],
        )
        restored = RiskAssessment.from_row(assessment.to_row())
        assert restored.anomalies == assessment.anomalies
        assert restored.risk_level == RiskLevel.HIGH

    def test_wrong_shape_anomalies_keep_valid_items(self):
        good = Anomaly(type="late_night", severity=RiskLevel.HIGH, confidence=0.9)
        row = RiskAssessment(
            visitor_id="v-1", risk_score=10.0, risk_level=RiskLevel.LOW, anomalies=[good],
        ).to_row()
        row["anomalies"] = json.dumps([{"type": "x"}, good.model_dump(mode="json"), "junk"])

        with capture_logs() as logs:
            restored = RiskAssessment.from_row(row)

        assert restored.anomalies == [good]
        warning = next(e for e in logs if e["event"] == "json_column_invalid")
        assert warning["table"] == "risk_assessments"
        assert warning["column"] == "anomalies"
        assert warning["dropped"] == 2

    def test_wrong_shape_explanation_uses_default(self):
        row = RiskAssessment(visitor_id="v-1", risk_score=10.0, risk_level=RiskLevel.LOW).to_row()
        row["anomalies"] = '[{"type": "x"}]'
        row["explanation"] = '{"primary_reasons": "oops"}'

        restored = RiskAssessment.from_row(row)
        assert restored.anomalies == []
        assert restored.explanation == Explanation()

    def test_wrong_shape_schedule_drops_bad_days(self):
        row = DomesticStaffProfile(
            name="x", phone_number="1", service_type=ServiceType.COOK, access_code="C-1",
        ).to_row()
        row["work_schedule"] = json.dumps({
            "monday": "09:00-17:00",
            "tuesday": {"start": "09:00", "end": "17:00"},
        })
        row["authorized_units"] = '["A-101", 7, null]'

        restored = DomesticStaffProfile.from_row(row)
        assert restored.work_schedule == {"tuesday": {"start": "09:00", "end": "17:00"}}
        assert restored.shift_for(0) is None
        assert restored.authorized_units == ["A-101"]

    def test_unparseable_optional_timestamp_stays_absent(self):
        row = DomesticStaffProfile(
            name="x", phone_number="1", service_type=ServiceType.COOK, access_code="C-1",
        ).to_row()
        row["last_entry"] = "not a time"

        with capture_logs() as logs:
            restored = DomesticStaffProfile.from_row(row)

        assert restored.last_entry is None
        assert any(e["event"] == "column_defaulted" and e["column"] == "last_entry" for e in logs)

    def test_unparseable_required_timestamp_uses_load_time(self):
        row = RiskAssessment(visitor_id="v-1", risk_score=10.0, risk_level=RiskLevel.LOW).to_row()
        row["assessment_time"] = "yesterday-ish"
        before = datetime.now(timezone.utc)

        with capture_logs() as logs:
            restored = RiskAssessment.from_row(row)

        assert restored.assessment_time >= before
        assert any(e["event"] == "column_defaulted" and e["column"] == "assessment_time" for e in logs)
