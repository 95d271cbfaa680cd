"""Integration tests for the glue load cycle."""

import builtins
import sys
from typing import TYPE_CHECKING

import pytest

from pytest_cuke.errors import (
    GlueDefinitionError,
    GlueDiscoveryError,
    GlueExecutionError,
    GlueLoadError,
    GlueWarning,
)
from pytest_cuke.glue import Glue, GlueLoader, GlueSettings, LoadState, load_glue

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from pytest_mock import MockerFixture

STEPS_ONE = '''
def have(count):
    pass

Given(r'^I have (\\d+) cukes$', have)

if True:
    @When(r'^I eat (\\d+)$')
    def eat(count):
        pass
'''

STEPS_TWO = '''
Then('^I am full$', lambda: None)
'''

HOOKS = '''
@Before
def open_basket():
    pass

Given('^a basket$', lambda: None)

After(lambda: None)

@Before()
def count_cukes():
    pass
'''


def test_steps_keep_discovery_and_declaration_order(
        write_glue: 'Callable[[str, str], Path]') -> None:
    """Order steps by file, then by statement."""
    write_glue('one_steps.py', STEPS_ONE)
    write_glue('two_steps.py', STEPS_TWO)

    glue = GlueLoader().load_glue('glue')

    assert isinstance(glue, Glue)
    assert [step.pattern for step in glue.step_definitions] == [
        r'^I have (\d+) cukes$',
        r'^I eat (\d+)$',
        '^I am full$',
    ]
    assert [str(step.location) for step in glue.step_definitions] == [
        'glue/one_steps.py:4:1',
        'glue/one_steps.py:7:6',
        'glue/two_steps.py:1:1',
    ]
    assert glue.hooks == ()


def test_hooks_keep_phase_and_order(write_glue: 'Callable[[str, str], Path]') -> None:
    """Collect hooks separately from steps in declaration order."""
    write_glue('hooks.py', HOOKS)

    glue = GlueLoader().load_glue('glue')

    assert [(hook.phase, hook.location.line) for hook in glue.hooks] == [
        ('before', 1),
        ('after', 7),
        ('before', 9),
    ]
    assert [hook.function.__name__ for hook in glue.before_hooks] == [
        'open_basket',
        'count_cukes',
    ]
    assert len(glue.after_hooks) == 1
    assert [step.pattern for step in glue.step_definitions] == ['^a basket$']


def test_step_keywords_are_equivalent(write_glue: 'Callable[[str, str], Path]') -> None:
    """Produce identical records whatever step keyword is used."""
    write_glue('keywords.py', '''
        def body():
            pass

        Given('^x$', body)
        When('^x$', body)
        Then('^x$', body)
        And('^x$', body)
        But('^x$', body)
    ''')

    glue = GlueLoader().load_glue('glue')

    assert len(glue.step_definitions) == 5
    for line, step in enumerate(glue.step_definitions, start=4):
        assert step.model_dump(exclude={'location'}) == glue.step_definitions[0].model_dump(
            exclude={'location'},
        )
        assert (step.location.line, step.location.column) == (line, 1)


def test_location_columns_follow_indentation(write_glue: 'Callable[[str, str], Path]') -> None:
    """Capture the column of indented and inline declarations."""
    write_glue('columns.py', '''
        def body():
            pass

        for pattern in ('^first$',):
            Given(pattern, body)

        if True:
            if True:
                When('^third$', body)

        x = 1; Then('^inline$', body)
    ''')

    glue = GlueLoader().load_glue('glue')

    assert [
        (step.location.line, step.location.column)
        for step in glue.step_definitions
    ] == [(5, 5), (9, 9), (11, 8)]


def test_factory_receives_registrations(write_glue: 'Callable[[str, str], Path]',
                                        mocker: 'MockerFixture') -> None:
    """Return what the factory builds from the accumulated records."""
    write_glue('steps.py', STEPS_TWO)
    write_glue('hooks.py', HOOKS)
    factory = mocker.Mock(return_value='aggregate')

    result = GlueLoader().load_glue('glue', factory)

    assert result == 'aggregate'
    factory.assert_called_once()
    steps, hooks = factory.call_args.args
    assert [step.pattern for step in steps] == ['^a basket$', '^I am full$']
    assert len(hooks) == 3


def test_empty_directory(glue_root: 'Path', mocker: 'MockerFixture',
                         assert_keywords_absent: 'Callable[[], None]') -> None:
    """Build the aggregate from two empty sequences."""
    factory = mocker.Mock(return_value='empty')

    assert load_glue(glue_root, factory) == 'empty'
    factory.assert_called_once_with([], [])
    assert_keywords_absent()


def test_accumulators_are_not_shared(write_glue: 'Callable[[str, str], Path]') -> None:
    """Start every load with empty accumulators."""
    write_glue('steps.py', STEPS_TWO)
    loader = GlueLoader()

    first = loader.load_glue('glue')
    second = loader.load_glue('glue')

    assert len(first.step_definitions) == 1
    assert len(second.step_definitions) == 1
    assert first.step_definitions[0].function is not second.step_definitions[0].function


def test_keywords_are_removed_after_load(write_glue: 'Callable[[str, str], Path]',
                                         assert_keywords_absent: 'Callable[[], None]') -> None:
    """Leave no keyword behind when none existed before."""
    write_glue('steps.py', STEPS_ONE)

    loader = GlueLoader()
    loader.load_glue('glue')

    assert loader.state == LoadState.DONE
    assert_keywords_absent()


def test_existing_keywords_are_restored(write_glue: 'Callable[[str, str], Path]',
                                        monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore keywords that were bound before the load."""
    sentinel = object()
    monkeypatch.setattr(builtins, 'Given', sentinel, raising=False)
    monkeypatch.setattr(builtins, 'After', None, raising=False)
    write_glue('steps.py', STEPS_ONE)

    with pytest.warns(GlueWarning):
        glue = GlueLoader().load_glue('glue')

    assert len(glue.step_definitions) == 2
    assert builtins.Given is sentinel  # type: ignore[attr-defined]
    assert builtins.After is None  # type: ignore[attr-defined]
    assert not hasattr(builtins, 'When')


def test_failure_restores_keywords(write_glue: 'Callable[[str, str], Path]',
                                   assert_keywords_absent: 'Callable[[], None]') -> None:
    """Restore keywords and surface the error of a failing glue file."""
    write_glue('a_steps.py', STEPS_ONE)
    write_glue('b_broken.py', '''
        Given('^registered$', lambda: None)
        raise ValueError('broken glue')
    ''')
    loader = GlueLoader()

    with pytest.raises(GlueExecutionError, match=r"'b_broken.py'") as error:
        loader.load_glue('glue')

    assert isinstance(error.value.__cause__, ValueError)
    assert error.value.context['line_num'] == 2
    assert loader.state == LoadState.FAILED
    assert_keywords_absent()


def test_failure_restores_existing_keywords(write_glue: 'Callable[[str, str], Path]',
                                            monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore pre-existing keywords when a glue file fails."""
    sentinel = object()
    monkeypatch.setattr(builtins, 'Then', sentinel, raising=False)
    write_glue('broken.py', 'raise KeyError("boom")\n')

    with pytest.warns(GlueWarning), pytest.raises(GlueExecutionError):
        GlueLoader().load_glue('glue')

    assert builtins.Then is sentinel  # type: ignore[attr-defined]
    assert not hasattr(builtins, 'Given')


def test_definition_error_propagates(write_glue: 'Callable[[str, str], Path]',
                                     assert_keywords_absent: 'Callable[[], None]') -> None:
    """Surface malformed declarations unwrapped."""
    write_glue('steps.py', '''
        Given('^x$', 'not callable')
    ''')

    with pytest.raises(GlueDefinitionError, match=r'in "glue/steps.py", line 1, column 1'):
        GlueLoader().load_glue('glue')

    assert_keywords_absent()


def test_discovery_error_installs_nothing(glue_root: 'Path', mocker: 'MockerFixture') -> None:
    """Abort before installing keywords when discovery fails."""
    install = mocker.patch('pytest_cuke.glue.loader.GlobalsInjector.install')

    with pytest.raises(GlueDiscoveryError):
        GlueLoader().load_glue(glue_root / 'missing')

    install.assert_not_called()


def test_nested_load_is_rejected(write_glue: 'Callable[[str, str], Path]',
                                 assert_keywords_absent: 'Callable[[], None]') -> None:
    """Reject a load started while another one is in progress."""
    write_glue('nested.py', '''
        from pytest_cuke.glue import load_glue

        load_glue('glue')
    ''')

    with pytest.raises(GlueLoadError, match=r'already in progress$'):
        GlueLoader().load_glue('glue')

    assert_keywords_absent()

    glue = GlueLoader(GlueSettings(pattern='none/*.py')).load_glue('glue')
    assert glue.step_definitions == ()


def test_settings_pattern(write_glue: 'Callable[[str, str], Path]') -> None:
    """Load only files matching the configured pattern."""
    write_glue('steps/one.py', STEPS_TWO)
    write_glue('support/env.py', 'raise RuntimeError("not glue")\n')

    glue = GlueLoader(GlueSettings(pattern='steps/*.py')).load_glue('glue')

    assert len(glue.step_definitions) == 1


def test_exit_marks_load_failed(write_glue: 'Callable[[str, str], Path]',
                                assert_keywords_absent: 'Callable[[], None]') -> None:
    """Fail the load and restore keywords when a glue file exits."""
    write_glue('exits.py', '''
        import sys

        Given('^registered$', lambda: None)
        sys.exit(3)
    ''')
    loader = GlueLoader()

    with pytest.raises(SystemExit):
        loader.load_glue('glue')

    assert loader.state == LoadState.FAILED
    assert not [name for name in sys.modules if name.startswith('cuke_glue_exits_')]
    assert_keywords_absent()
