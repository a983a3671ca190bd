from invisinsights.agents.schema_validator import SchemaValidator
from invisinsights.models.project_store import ProjectStore, SessionBuffer


def test_store_round_trip(config_data):
    store = ProjectStore()
    config = SchemaValidator().validate(config_data)

    store.save("proj", config, "token-1")

    assert store.is_connected("proj")
    assert store.get("proj").config.survey_id == "s1"
    assert store.get(None) is None
    assert not store.is_connected("other")


def test_session_buffer_drops_oldest():
    buffer = SessionBuffer(max_size=2)
    for index in range(3):
        buffer.append({"session_id": str(index)})

    assert [entry["session"]["session_id"] for entry in buffer.snapshot()] == ["1", "2"]
    assert len(buffer) == 2
