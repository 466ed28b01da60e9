from drag import DragRescheduleController
from models import Task


def _make_controller():
    emitted = []
    controller = DragRescheduleController(on_reschedule=lambda task_id, key: emitted.append((task_id, key)))
    task = Task(id="a", text="Run assay", due_date="2026-03-05")
    controller.update_index({"2026-03-05": [task]})
    return controller, emitted


def test_drop_emits_exactly_once() -> None:
    controller, emitted = _make_controller()

    assert controller.on_drag_start("a")
    controller.on_drag_over("2026-03-07")
    assert controller.session.candidate_key == "2026-03-07"
    assert controller.on_drop("2026-03-07")
    assert not controller.on_drop("2026-03-08")

    assert emitted == [("a", "2026-03-07")]
    assert controller.session is None


def test_cancel_after_hover_emits_nothing() -> None:
    controller, emitted = _make_controller()

    controller.on_drag_start("a")
    controller.on_drag_over("2026-03-09")
    controller.on_cancel()

    assert emitted == []
    assert not controller.is_dragging


def test_drop_outside_any_cell_is_silent() -> None:
    controller, emitted = _make_controller()

    controller.on_drag_start("a")
    assert not controller.on_drop(None)
    assert emitted == []
    assert not controller.is_dragging


def test_drop_on_source_date_still_emits() -> None:
    controller, emitted = _make_controller()

    controller.on_drag_start("a")
    controller.on_drop("2026-03-05")

    assert emitted == [("a", "2026-03-05")]


def test_unknown_task_does_not_start() -> None:
    controller, _ = _make_controller()

    assert not controller.on_drag_start("ghost")
    assert controller.session is None


def test_second_start_while_dragging_is_ignored() -> None:
    controller, _ = _make_controller()
    controller.update_index(
        {
            "2026-03-05": [Task(id="a", due_date="2026-03-05")],
            "2026-03-06": [Task(id="b", due_date="2026-03-06")],
        }
    )

    assert controller.on_drag_start("a")
    assert not controller.on_drag_start("b")
    assert controller.session.task_id == "a"
    assert controller.active_task.id == "a"


def test_idle_listeners_fire_on_end_and_can_unsubscribe() -> None:
    controller, _ = _make_controller()
    calls = []
    unsubscribe = controller.subscribe(lambda: calls.append("idle"))

    controller.on_drag_start("a")
    controller.on_cancel()
    unsubscribe()
    controller.on_drag_start("a")
    controller.on_drop("2026-03-06")

    assert calls == ["idle"]


def test_pointer_activation_distance() -> None:
    controller, emitted = _make_controller()

    controller.pointer_down("a", 0, 0)
    controller.pointer_move(3, 4, "2026-03-06")
    assert not controller.is_dragging

    controller.pointer_move(6, 8, "2026-03-06")
    assert controller.is_dragging
    assert controller.session.candidate_key == "2026-03-06"

    assert controller.pointer_up("2026-03-06")
    assert emitted == [("a", "2026-03-06")]


def test_pointer_release_before_activation_is_a_click() -> None:
    controller, emitted = _make_controller()

    controller.pointer_down("a", 10, 10)
    controller.pointer_move(12, 12)

    assert not controller.pointer_up("2026-03-06")
    assert emitted == []


def test_without_reschedule_callback_pointer_drag_is_disabled() -> None:
    controller = DragRescheduleController()
    controller.update_index({"2026-03-05": [Task(id="a", due_date="2026-03-05")]})

    controller.pointer_down("a", 0, 0)
    controller.pointer_move(50, 50)

    assert not controller.enabled
    assert not controller.is_dragging
