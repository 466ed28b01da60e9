from shortcuts import KeyEvent, ShortcutContext, resolve_shortcut


def test_granularity_and_navigation_keys() -> None:
    ctx = ShortcutContext()

    assert resolve_shortcut(KeyEvent("d"), ctx) == "granularity_day"
    assert resolve_shortcut(KeyEvent("W"), ctx) == "granularity_week"
    assert resolve_shortcut(KeyEvent("m"), ctx) == "granularity_month"
    assert resolve_shortcut(KeyEvent("t"), ctx) == "today"
    assert resolve_shortcut(KeyEvent("ArrowLeft"), ctx) == "previous"
    assert resolve_shortcut(KeyEvent("Escape"), ctx) == "escape"
    assert resolve_shortcut(KeyEvent("q"), ctx) is None


def test_modifiers_only_pass_escape_and_horizontal_arrows() -> None:
    ctx = ShortcutContext()

    assert resolve_shortcut(KeyEvent("d", ctrl=True), ctx) is None
    assert resolve_shortcut(KeyEvent("ArrowUp", alt=True), ctx) is None
    assert resolve_shortcut(KeyEvent("ArrowRight", meta=True), ctx) == "next"
    assert resolve_shortcut(KeyEvent("Escape", ctrl=True), ctx) == "escape"


def test_suppressed_in_text_inputs_and_modals() -> None:
    for element in ("input", "TEXTAREA", "select", "contenteditable"):
        assert resolve_shortcut(KeyEvent("d"), ShortcutContext(focused_element=element)) is None

    assert resolve_shortcut(KeyEvent("d"), ShortcutContext(modal_open=True)) is None
    assert resolve_shortcut(KeyEvent("d"), ShortcutContext(calendar_visible=False)) is None
    assert resolve_shortcut(KeyEvent("d"), ShortcutContext(focused_element="button")) == "granularity_day"
