"""
JSON-compatible interchange records.

Keys are camelCase and instants are ISO-8601 strings. Parsers accept a
trailing "Z" and raise InvalidInputError when a required key is missing or
a value cannot be converted.
"""

from typing import Any

from .circadian_math import format_iso, parse_iso_datetime
from .errors import InvalidInputError
from .types import LightingDetectionResult, LightSample, ResultsModel, Session


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _screen_flag(value: Any) -> bool:
    """Parse the 0/1 screen state; strings such as "0" are read as numbers."""
    flag = int(value)
    if flag not in (0, 1):
        raise InvalidInputError(f"screenOn must be 0 or 1, got {value!r}")
    return flag == 1


# =============================================================================
# Sessions
# =============================================================================


def sample_to_dict(sample: LightSample) -> dict:
    """Convert a sample to a JSON-serializable dict."""
    return {
        "timestamp": format_iso(sample.timestamp),
        "ambientLux": sample.ambient_lux,
        "screenOn": 1 if sample.screen_on else 0,
        "screenBrightness": sample.screen_brightness,
        "accelMagnitude": sample.accel_magnitude,
        "orientationPitch": sample.orientation_pitch,
    }


def sample_from_dict(data: dict) -> LightSample:
    """Convert a JSON dict to a LightSample."""
    try:
        return LightSample(
            timestamp=parse_iso_datetime(data["timestamp"]),
            ambient_lux=float(data["ambientLux"]),
            screen_on=_screen_flag(data["screenOn"]),
            screen_brightness=_optional_float(data.get("screenBrightness")),
            accel_magnitude=_optional_float(data.get("accelMagnitude")),
            orientation_pitch=_optional_float(data.get("orientationPitch")),
        )
    except KeyError as e:
        raise InvalidInputError(f"Sample record is missing {e.args[0]!r}") from e
    except InvalidInputError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed sample record: {e}") from e


def session_to_dict(session: Session) -> dict:
    """Convert a session to a JSON-serializable dict."""
    return {
        "id": session.id,
        "startedAt": format_iso(session.started_at),
        "stoppedAt": format_iso(session.stopped_at),
        "samples": [sample_to_dict(s) for s in session.samples],
        "meta": session.meta,
        "timezone": session.timezone,
    }


def session_from_dict(data: dict) -> Session:
    """Convert a JSON dict to a Session."""
    try:
        return Session(
            id=data["id"],
            started_at=parse_iso_datetime(data["startedAt"]),
            stopped_at=parse_iso_datetime(data["stoppedAt"]),
            samples=tuple(sample_from_dict(s) for s in data["samples"]),
            meta=data.get("meta"),
            timezone=data.get("timezone"),
        )
    except KeyError as e:
        raise InvalidInputError(f"Session record is missing {e.args[0]!r}") from e
    except InvalidInputError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed session record: {e}") from e


# =============================================================================
# Results
# =============================================================================


def results_to_dict(results: ResultsModel, include_series: bool = False) -> dict:
    """
    Convert results to a JSON-serializable dict.

    Args:
        results: Processed session results
        include_series: Also emit the per-sample timelines

    Returns:
        Summary dict, with derived healthScore / riskLevel included
    """
    data = {
        "sessionId": results.session_id,
        "startTime": format_iso(results.start_time),
        "endTime": format_iso(results.end_time),
        "durationHours": results.duration_hours,
        "totalDoseX": results.total_dose_x,
        "msiPredicted": results.msi_predicted,
        "phaseShift": results.phase_shift,
        "averageCS": results.average_cs,
        "peakCS": results.peak_cs,
        "averageMelanopicLux": results.average_melanopic_lux,
        "lightType": results.light_type,
        "healthScore": results.health_score,
        "riskLevel": results.risk_level,
        "metadata": results.metadata,
        "timezone": results.timezone,
    }

    if include_series:
        data["timestamps"] = [format_iso(t) for t in results.timestamps]
        data["luxValues"] = list(results.lux_values)
        data["melanopicValues"] = list(results.melanopic_values)
        data["csValues"] = list(results.cs_values)

    return data


def results_from_dict(data: dict) -> ResultsModel:
    """
    Convert a JSON dict back to ResultsModel.

    Derived fields (healthScore, riskLevel) are ignored; they are recomputed
    from the stored metrics. Missing series restore as empty.
    """
    try:
        return ResultsModel(
            session_id=data["sessionId"],
            start_time=parse_iso_datetime(data["startTime"]),
            end_time=parse_iso_datetime(data["endTime"]),
            duration_hours=float(data["durationHours"]),
            timestamps=tuple(parse_iso_datetime(t) for t in data.get("timestamps", ())),
            lux_values=tuple(float(v) for v in data.get("luxValues", ())),
            melanopic_values=tuple(float(v) for v in data.get("melanopicValues", ())),
            cs_values=tuple(float(v) for v in data.get("csValues", ())),
            total_dose_x=float(data["totalDoseX"]),
            msi_predicted=float(data["msiPredicted"]),
            phase_shift=float(data["phaseShift"]),
            average_cs=float(data["averageCS"]),
            peak_cs=float(data["peakCS"]),
            average_melanopic_lux=float(data["averageMelanopicLux"]),
            light_type=data["lightType"],
            metadata=data.get("metadata"),
            timezone=data.get("timezone"),
        )
    except KeyError as e:
        raise InvalidInputError(f"Results record is missing {e.args[0]!r}") from e
    except InvalidInputError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed results record: {e}") from e


def detection_to_dict(result: LightingDetectionResult) -> dict:
    """Convert a detection result to a JSON-serializable dict."""
    return result.to_map()
