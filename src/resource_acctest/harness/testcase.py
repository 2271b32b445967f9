"""Multi-step acceptance scenarios."""
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from resource_acctest.config.schemas import AcceptanceConfig
from resource_acctest.domain.core.exceptions import AccTestError, MismatchError, ScenarioStepError
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.resilience import RetryConfig

from .checks import Check, CheckContext, LiveLookup
from .configuration import Configuration
from .engine import Engine
from .state import State

logger = get_logger(__name__)


@dataclass
class TestStep:
    """
    One step of a scenario.

    A configuration step applies ``config``, runs ``check`` and then requires
    an empty plan unless ``expect_non_empty_plan`` is set. With
    ``expect_error`` the apply must fail with a message matching the pattern.
    An import step (``import_state``) imports the object at ``resource_name``
    and, with ``import_state_verify``, compares every attribute with the
    applied state except the keys listed in ``import_state_verify_ignore``.
    """
    __test__ = False

    config: Optional[Configuration] = None
    check: Optional[Check] = None
    expect_non_empty_plan: bool = False
    expect_error: Optional[str] = None
    import_state: bool = False
    resource_name: Optional[str] = None
    import_state_id: Optional[str] = None
    import_state_verify: bool = False
    import_state_verify_ignore: List[str] = field(default_factory=list)


@dataclass
class TestCase:
    """Steps plus the hooks run before and after them."""
    __test__ = False

    steps: List[TestStep]
    pre_check: Optional[Callable[[], None]] = None
    error_check: Optional[Callable[[BaseException], None]] = None
    check_destroy: Optional[Check] = None


def _verify_import(address: str, applied: dict, imported: dict, ignore: List[str]) -> None:
    def ignored(key: str) -> bool:
        return any(key == prefix or key.startswith(prefix) for prefix in ignore)

    for key in sorted(set(applied) | set(imported)):
        if ignored(key):
            continue
        if applied.get(key) != imported.get(key):
            raise MismatchError(address, key, applied.get(key), imported.get(key))


class TestRunner:
    """Drives a ``TestCase`` against one AWS client with a fresh state per run."""
    __test__ = False

    def __init__(self, aws_client: AWSClient, retry_config: Optional[RetryConfig] = None,
                 acceptance: Optional[AcceptanceConfig] = None,
                 sleep: Callable[[float], Any] = time.sleep):
        self.engine = Engine(aws_client, retry_config=retry_config, acceptance=acceptance, sleep=sleep)
        self.lookup = LiveLookup(aws_client, retry_config=retry_config, sleep=sleep)

    def run(self, case: TestCase) -> State:
        """
        Run every step, then always destroy and run the destroy check.

        Raises:
            ScenarioStepError: If a step fails; carries the step number and cause
        """
        if case.pre_check is not None:
            case.pre_check()

        state = State()
        ctx = CheckContext(state=state, engine=self.engine, lookup=self.lookup)
        step_error: Optional[BaseException] = None
        try:
            for number, step in enumerate(case.steps, start=1):
                try:
                    self._run_step(number, step, ctx)
                except ScenarioStepError:
                    raise
                except AccTestError as e:
                    if case.error_check is not None:
                        case.error_check(e)
                    raise ScenarioStepError(number, str(e), e) from e
        except BaseException as e:
            step_error = e
            raise
        finally:
            self._teardown(case, ctx, step_error)
        return state

    def _run_step(self, number: int, step: TestStep, ctx: CheckContext) -> None:
        logger.info("Running test step", step=number,
                    kind="import" if step.import_state else "config")
        if step.import_state:
            self._run_import_step(number, step, ctx)
            return
        if step.config is None:
            raise ScenarioStepError(number, "step has neither a configuration nor an import")

        logger.debug("Step configuration", step=number, configuration=step.config.render())
        if step.expect_error is not None:
            self._run_expect_error_step(number, step, ctx)
            return

        self.engine.apply(step.config, ctx.state)
        if step.check is not None:
            step.check(ctx)

        plan = self.engine.plan(step.config, ctx.state)
        if not plan.is_empty and not step.expect_non_empty_plan:
            raise ScenarioStepError(
                number, f"After applying this step, the plan was not empty:\n{plan.describe()}"
            )
        if plan.is_empty and step.expect_non_empty_plan:
            raise ScenarioStepError(number, "Expected a non-empty plan, but got an empty plan")

    def _run_expect_error_step(self, number: int, step: TestStep, ctx: CheckContext) -> None:
        try:
            self.engine.apply(step.config, ctx.state)
        except AccTestError as e:
            if not re.search(step.expect_error, str(e)):
                raise ScenarioStepError(
                    number, f"expected an error matching /{step.expect_error}/, got: {e}", e
                ) from e
            logger.info("Step failed as expected", step=number, error=str(e))
            return
        raise ScenarioStepError(number, f"expected an error matching /{step.expect_error}/, got none")

    def _run_import_step(self, number: int, step: TestStep, ctx: CheckContext) -> None:
        if not step.resource_name:
            raise ScenarioStepError(number, "import step requires resource_name")
        applied = ctx.state.require(step.resource_name)
        identifier = step.import_state_id or applied.identifier

        imported = self.engine.import_resource(applied.resource_type, identifier)
        if step.import_state_verify:
            _verify_import(step.resource_name, applied.flatten(), imported.flatten(),
                           step.import_state_verify_ignore)
        logger.info("Imported resource", address=step.resource_name, identifier=identifier)

    def _teardown(self, case: TestCase, ctx: CheckContext, step_error: Optional[BaseException]) -> None:
        try:
            self.engine.destroy(ctx.state)
            if case.check_destroy is not None:
                case.check_destroy(ctx)
        except AccTestError as e:
            if step_error is None:
                raise
            logger.error("Teardown failed after an earlier step failure", error=str(e))


def run_test(case: TestCase, aws_client: AWSClient, **kwargs: Any) -> State:
    """Run ``case`` with a fresh ``TestRunner``; ``kwargs`` go to the runner."""
    return TestRunner(aws_client, **kwargs).run(case)
