from prayer_timer.data.storage import Storage
from prayer_timer.data.wellness import AUTHORIZED, DENIED, SqliteWellnessLog


def make_storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "app.db")
    storage.init_db()
    return storage


def test_prompt_is_shown_once_per_installation(tmp_path) -> None:
    storage = make_storage(tmp_path)
    prompts = []

    def prompt() -> bool:
        prompts.append(True)
        return True

    log = SqliteWellnessLog(storage, prompt=prompt)
    assert log.request_authorization() is True
    assert log.request_authorization() is True

    reopened = SqliteWellnessLog(storage, prompt=prompt)
    assert reopened.request_authorization() is True
    assert len(prompts) == 1
    assert reopened.authorization == AUTHORIZED


def test_denied_log_skips_writes(tmp_path) -> None:
    storage = make_storage(tmp_path)
    log = SqliteWellnessLog(storage, prompt=lambda: False)

    assert log.request_authorization() is False
    assert log.authorization == DENIED
    assert log.log_interval(100.0, 200.0) is False
    assert storage.list_mindful_sessions() == []


def test_undetermined_authorization_skips_writes(tmp_path) -> None:
    storage = make_storage(tmp_path)
    log = SqliteWellnessLog(storage)

    assert log.log_interval(100.0, 200.0) is False
    assert log.request_authorization() is False
    assert log.authorization is None


def test_authorized_log_writes_valid_intervals_only(tmp_path) -> None:
    storage = make_storage(tmp_path)
    log = SqliteWellnessLog(storage, prompt=lambda: True)
    log.request_authorization()

    assert log.log_interval(100.0, 700.0) is True
    assert log.log_interval(700.0, 700.0) is False
    assert log.log_interval(900.0, 800.0) is False

    rows = storage.list_mindful_sessions()
    assert [(row.started_at, row.ended_at) for row in rows] == [(100.0, 700.0)]


def test_disabled_log_never_prompts(tmp_path) -> None:
    storage = make_storage(tmp_path)
    prompts = []
    log = SqliteWellnessLog(storage, prompt=lambda: prompts.append(True) or True, enabled=False)

    assert log.request_authorization() is False
    assert log.log_interval(100.0, 200.0) is False
    assert prompts == []
