from payslip.consolidation.aggregator import consolidate
from payslip.consolidation.models import ConsolidationResult
from payslip.database.repositories.code_group_repository import CodeGroupRepository
from payslip.database.repositories.payroll_data_repository import PayrollDataRepository
from payslip.logging.logger import Log


class ConsolidationService:
    """Builds the consolidated table of one user from stored payslips."""

    def __init__(
        self,
        payroll_repo: PayrollDataRepository,
        code_group_repo: CodeGroupRepository,
    ) -> None:
        self._payroll_repo = payroll_repo
        self._code_group_repo = code_group_repo

    def consolidate_for_user(
        self,
        user_id: int,
        chronological: bool = False,
    ) -> ConsolidationResult:
        # Alias groups are read once so one result never mixes two mappings.
        alias_groups = self._code_group_repo.find_by_user(user_id)
        payslips = self._payroll_repo.find_by_user(user_id)
        Log.info(
            f"Consolidating {len(payslips)} payslips for user {user_id} "
            f"with {len(alias_groups)} alias groups"
        )
        return consolidate(payslips, alias_groups, chronological=chronological)
