"""
Sequential scenario execution.

Each scenario builds one request, sends it, checks the status and, when
asked to, the payload format. Any ProbeError fails that scenario only;
the run goes on with the next one.
"""

from dataclasses import dataclass, field

from kraken_probe.api.auth import Authenticator, SignedRequest, build_public_request
from kraken_probe.api.client import ApiResponse, KrakenRestClient
from kraken_probe.api.exceptions import ConfigurationError, ProbeError
from kraken_probe.config.schemas import ProbeSettings
from kraken_probe.scenarios.schemas import Feature, Scenario
from kraken_probe.utils.logger import LoggerMixin, log_context
from kraken_probe.validation.validator import check_response


@dataclass
class ScenarioResult:
    """Outcome of one scenario"""

    feature: str
    scenario: str
    passed: bool
    detail: str = ""
    response: str | None = None


@dataclass
class RunSummary:
    """Aggregated outcome of a run"""

    results: list[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0


class ScenarioRunner(LoggerMixin):
    """Runs scenarios one after the other against a single client"""

    def __init__(
        self,
        client: KrakenRestClient,
        settings: ProbeSettings,
        authenticator: Authenticator | None = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.authenticator = authenticator

    def build_request(self, scenario: Scenario) -> SignedRequest:
        if not scenario.is_private:
            return build_public_request(
                scenario.url,
                scenario.params,
                domain=self.settings.api_domain,
                user_agent=self.settings.user_agent,
            )
        if self.authenticator is None:
            raise ConfigurationError(f"Scenario {scenario.name!r} needs API credentials")
        return self.authenticator.private_request(scenario.url, scenario.params)

    async def run_scenario(self, feature: Feature, scenario: Scenario) -> ScenarioResult:
        """
        Run one scenario.

        Returns:
            ScenarioResult, failed with the error message on any ProbeError
        """
        response: ApiResponse | None = None

        with log_context(feature=feature.feature, scenario=scenario.name):
            try:
                request = self.build_request(scenario)
                response = await self.client.send(request)
                response.ensure_success()

                detail = f"status {response.status}"
                if scenario.check is not None:
                    payload = check_response(scenario.check, response.body)
                    detail = payload.summary()  # type: ignore[attr-defined]

            except ProbeError as e:
                self.logger.error(
                    "scenario_failed",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                result = ScenarioResult(
                    feature=feature.feature,
                    scenario=scenario.name,
                    passed=False,
                    detail=f"{type(e).__name__}: {e}",
                    response=response.text() if response is not None else None,
                )
                print(f"  [FAIL] {scenario.name} - {result.detail}")
                if result.response is not None:
                    print(f"         response: {result.response}")
                return result

            self.logger.info("scenario_passed", detail=detail)
            print(f"  [PASS] {scenario.name} - {detail}")
            return ScenarioResult(
                feature=feature.feature,
                scenario=scenario.name,
                passed=True,
                detail=detail,
            )

    async def run(self, features: list[Feature]) -> RunSummary:
        summary = RunSummary()
        for feature in features:
            print(f"\n=== Feature: {feature.feature} ===")
            for scenario in feature.scenarios:
                summary.results.append(await self.run_scenario(feature, scenario))

        self.logger.info("run_finished", passed=summary.passed, failed=summary.failed)
        return summary
