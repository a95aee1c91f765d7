"""
registry/orchestrator.py - Whole-registry validation run.

Pipeline:
1. VALIDATING_TOKENS: tokens/{address}/ entries, one at a time
2. VALIDATING_CONTRACTS: contracts/{slug}/ projects and their contracts
3. CROSS_REFERENCING: token.project <-> contracts/ consistency
4. SUMMARIZING: counts, findings, verdict

ENTRY CONTRACT:
- Checks for one entry run in a fixed order; the first hard error ends
  that entry. Warnings never stop an entry.
- A bad entry never stops the run.
- Exceeding an entry-count cap raises RateLimitExceededError and aborts
  the run (FATAL phase).
"""

from pathlib import Path
from typing import Any, List, Optional, Union

from config import ValidationConfig
from core.constants import (
    CONTRACTS_DIR,
    PROJECT_EMAIL_FIELDS,
    PROJECT_INFO_FILE,
    PROJECT_URL_FIELDS,
    TOKEN_URL_FIELDS,
    TOKENS_DIR,
    ErrorCode,
)
from core.exceptions import (
    FatalError,
    JSONLoadError,
    PathTraversalError,
    RateLimitExceededError,
)
from core.logging import get_logger, log_finding
from core.models import (
    CheckResult,
    ContractDescriptor,
    ContractProject,
    ContractRef,
    RunSummary,
    TokenEntry,
)
from registry.index import ValidationRun
from registry.schema_loader import SchemaSet, SchemaValidator, load_schemas
from registry.state_machine import RunPhase
from validators.abi import validate_abi
from validators.address import (
    validate_address_directory,
    validate_eip55_checksum,
    validate_token_address,
)
from validators.email import validate_email
from validators.logo import validate_logo
from validators.safe_json import safe_read_json, safe_read_text
from validators.safe_path import safe_path_join, validate_contract_name
from validators.solidity import validate_solidity_source
from validators.urls import validate_urls

logger = get_logger(__name__)


class RegistryValidator:
    """
    Validate a registry checkout.

    Args:
        root: Registry root holding tokens/ and contracts/
        schemas: Compiled token and project schemas
        config: Limits (default: built-in defaults)
    """

    def __init__(
        self,
        root: Union[str, Path],
        schemas: SchemaSet,
        config: Optional[ValidationConfig] = None,
    ):
        self.root = Path(root).absolute()
        self.tokens_dir = self.root / TOKENS_DIR
        self.contracts_dir = self.root / CONTRACTS_DIR
        self.schemas = schemas
        self.config = config or ValidationConfig()

    # =========================================================================
    # RUN
    # =========================================================================

    def run(self) -> RunSummary:
        """
        Execute all phases over a fresh index.

        Raises:
            FatalError: a registry-wide limit was exceeded
        """
        run = ValidationRun()
        logger.info("Validating registry", extra={"context": {"root": str(self.root)}})

        try:
            run.state.transition_to(RunPhase.VALIDATING_TOKENS)
            self.validate_tokens(run)

            run.state.transition_to(RunPhase.VALIDATING_CONTRACTS)
            self.validate_contracts(run)

            run.state.transition_to(RunPhase.CROSS_REFERENCING)
            self.cross_reference(run)

            run.state.transition_to(RunPhase.SUMMARIZING)
            summary = self.summarize(run)

            run.state.transition_to(RunPhase.DONE)
        except FatalError as e:
            run.state.abort(str(e))
            logger.error(
                f"FATAL: {e.message}",
                extra={"context": {"code": e.code.value, **e.details}},
            )
            raise

        return summary

    # =========================================================================
    # RECORDING
    # =========================================================================

    def _record(self, run: ValidationRun, result: CheckResult) -> bool:
        """Store and log a validator result; True if it has no errors."""
        for finding in [*result.warnings, *result.errors]:
            finding.phase = run.state.phase.name
            run.findings.append(finding)
            log_finding(logger, finding)
        return result.valid

    def _fail(
        self,
        run: ValidationRun,
        code: ErrorCode,
        message: str,
        subject: Optional[str] = None,
        **details: Any,
    ) -> bool:
        self._record(run, CheckResult().error(code, message, subject, **details))
        return False

    def _check_schema(
        self,
        run: ValidationRun,
        schema: SchemaValidator,
        data: Any,
        label: str,
        subject: str,
    ) -> bool:
        messages = schema(data)
        result = CheckResult()
        for message in messages:
            result.error(
                ErrorCode.SCHEMA_VIOLATION,
                f"Schema validation failed for {label}: {message}",
                subject=subject,
            )
        return self._record(run, result)

    def _list_subdirs(self, run: ValidationRun, parent: Path) -> List[str]:
        """Sorted names of real (non-symlink) subdirectories of parent."""
        try:
            entries = sorted(parent.iterdir(), key=lambda p: p.name)
        except OSError as e:
            self._fail(
                run,
                ErrorCode.READ_ERROR,
                f"Failed to read {parent.name} directory: {e.strerror or e}",
                subject=parent.name,
            )
            return []

        names = []
        for entry in entries:
            if entry.is_symlink():
                self._fail(
                    run,
                    ErrorCode.PATH_TRAVERSAL,
                    f"Symbolic links are not allowed: {parent.name}/{entry.name}",
                    subject=entry.name,
                )
                continue
            if entry.is_dir():
                names.append(entry.name)
        return names

    # =========================================================================
    # TOKENS
    # =========================================================================

    def validate_tokens(self, run: ValidationRun) -> None:
        """Validate every tokens/{address}/ directory."""
        logger.info("Validating Tokens")

        if not self.tokens_dir.is_dir():
            logger.warning("Tokens directory not found", extra={"context": {"path": str(self.tokens_dir)}})
            return

        dirs = self._list_subdirs(run, self.tokens_dir)
        if len(dirs) > self.config.max_tokens:
            raise RateLimitExceededError(
                f"Too many tokens to validate: {len(dirs)} (max: {self.config.max_tokens}). "
                "Please submit tokens in smaller batches.",
                details={"count": len(dirs), "max": self.config.max_tokens},
            )

        for dir_name in dirs:
            if self._validate_token(run, dir_name):
                run.tokens_validated += 1

        logger.info(f"Total tokens validated: {run.tokens_validated}")

    def _validate_token(self, run: ValidationRun, dir_name: str) -> bool:
        if not self._record(run, validate_address_directory(dir_name, self.tokens_dir)):
            return False

        try:
            token_dir = safe_path_join(self.tokens_dir, dir_name)
            data = safe_read_json(
                safe_path_join(token_dir, f"{dir_name}.json"),
                self.config.max_json_bytes,
            )
        except (PathTraversalError, JSONLoadError) as e:
            return self._fail(
                run, e.code, f"Failed to read {dir_name}.json: {e.message}", subject=dir_name, **e.details
            )

        if not self._check_schema(run, self.schemas.token, data, f"{dir_name}.json", dir_name):
            return False

        token = TokenEntry.from_dict(data)

        if not self._record(run, validate_token_address(token.address, dir_name, token.symbol)):
            return False

        if not self._record(run, validate_urls(data, TOKEN_URL_FIELDS)):
            return False

        if token.support and "@" in token.support:
            email_result = validate_email(
                token.support, "support email", self.config.disposable_domains
            )
            if not self._record(run, email_result):
                return False

        if token.decimals > self.config.recommended_max_decimals:
            self._record(run, CheckResult().warn(
                ErrorCode.UNUSUAL_DECIMALS,
                f"{token.symbol}: Unusual decimals ({token.decimals}) - verify this is correct",
                subject=token.address,
                decimals=token.decimals,
            ))

        logo_result = validate_logo(
            token_dir,
            token.address,
            token.symbol,
            size_warning=self.config.logo_size_warning,
            size_error=self.config.logo_size_error,
        )
        if not self._record(run, logo_result):
            return False

        if run.index.has(token.address):
            return self._fail(
                run,
                ErrorCode.DUPLICATE_ADDRESS,
                f"Duplicate address found: {token.address} (already used by {run.index.owner_of(token.address)})",
                subject=token.address,
            )

        run.index.register_token(token)

        context = {"symbol": token.symbol, "address": token.address}
        if token.red_flags:
            context["red_flags"] = len(token.red_flags)
        logger.info(f"{token.symbol} ({token.name}) - {dir_name}", extra={"context": context})
        return True

    # =========================================================================
    # CONTRACTS
    # =========================================================================

    def validate_contracts(self, run: ValidationRun) -> None:
        """Validate every contracts/{slug}/ project."""
        logger.info("Validating Contracts")

        if not self.contracts_dir.is_dir():
            logger.warning("Contracts directory not found", extra={"context": {"path": str(self.contracts_dir)}})
            return

        slugs = self._list_subdirs(run, self.contracts_dir)
        if len(slugs) > self.config.max_projects:
            raise RateLimitExceededError(
                f"Too many projects to validate: {len(slugs)} (max: {self.config.max_projects})",
                details={"count": len(slugs), "max": self.config.max_projects},
            )

        for slug in slugs:
            if self._validate_project(run, slug):
                run.projects_validated += 1

        logger.info(f"Total projects validated: {run.projects_validated}")
        logger.info(f"Total contract files validated: {run.contracts_validated}")

    def _validate_project(self, run: ValidationRun, slug: str) -> bool:
        logger.info(f"Project: {slug}", extra={"context": {"project": slug}})

        try:
            project_dir = safe_path_join(self.contracts_dir, slug)
            data = safe_read_json(
                safe_path_join(project_dir, PROJECT_INFO_FILE),
                self.config.max_json_bytes,
            )
        except (PathTraversalError, JSONLoadError) as e:
            return self._fail(
                run, e.code, f"{slug}: Failed to read {PROJECT_INFO_FILE}: {e.message}", subject=slug, **e.details
            )

        if not self._check_schema(run, self.schemas.contract, data, f"{slug}/{PROJECT_INFO_FILE}", slug):
            return False

        project = ContractProject.from_dict(slug, data)

        if not self._record(run, validate_urls(data, PROJECT_URL_FIELDS)):
            return False

        for field in PROJECT_EMAIL_FIELDS:
            email = getattr(project, field)
            if email:
                email_result = validate_email(email, f"{field} email", self.config.disposable_domains)
                if not self._record(run, email_result):
                    return False

        if len(project.contracts) > self.config.max_contracts_per_project:
            raise RateLimitExceededError(
                f"Too many contracts in {slug}: {len(project.contracts)} "
                f"(max: {self.config.max_contracts_per_project})",
                details={
                    "project": slug,
                    "count": len(project.contracts),
                    "max": self.config.max_contracts_per_project,
                },
            )

        project_valid = True

        seen_names = set()
        for contract in project.contracts:
            if contract.name in seen_names:
                # Only the first descriptor for a name is validated
                project_valid = self._fail(
                    run,
                    ErrorCode.DUPLICATE_CONTRACT_NAME,
                    f"Duplicate contract name in {slug}: {contract.name}",
                    subject=f"{slug}/{contract.name}",
                )
                continue
            seen_names.add(contract.name)

            if self._validate_contract(run, project, project_dir, contract):
                run.contracts_validated += 1
            else:
                project_valid = False

        return project_valid

    def _validate_contract(
        self,
        run: ValidationRun,
        project: ContractProject,
        project_dir: Path,
        contract: ContractDescriptor,
    ) -> bool:
        if not self._record(run, validate_contract_name(contract.name)):
            return False

        if not self._record(run, validate_eip55_checksum(contract.address, contract.name)):
            return False

        previous_owner = run.index.owner_of(contract.address)
        run.index.register_contract(contract.address, ContractRef(project.slug, contract.name))
        if previous_owner is not None:
            return self._fail(
                run,
                ErrorCode.DUPLICATE_ADDRESS,
                f"Duplicate address found: {contract.address} ({contract.name}, already used by {previous_owner})",
                subject=contract.address,
            )

        label = f"{project.slug}/{contract.source_filename}"
        try:
            source = safe_read_text(
                safe_path_join(project_dir, contract.source_filename),
                self.config.max_source_bytes,
            )
        except (PathTraversalError, JSONLoadError) as e:
            return self._fail(run, e.code, f"Missing or unreadable {label}: {e.message}", subject=label)

        if not self._record(run, validate_solidity_source(source, contract.name)):
            return False

        label = f"{project.slug}/{contract.abi_filename}"
        try:
            abi = safe_read_json(
                safe_path_join(project_dir, contract.abi_filename),
                self.config.max_json_bytes,
            )
        except (PathTraversalError, JSONLoadError) as e:
            return self._fail(run, e.code, f"Invalid {label}: {e.message}", subject=label)

        if not self._record(run, validate_abi(abi, contract.name)):
            return False

        logger.info(
            f"{contract.type}: {contract.name} ({contract.address})",
            extra={"context": {"project": project.slug}},
        )
        return True

    # =========================================================================
    # CROSS-REFERENCES
    # =========================================================================

    def cross_reference(self, run: ValidationRun) -> None:
        """Check token.project references against contracts/."""
        logger.info("Cross-Reference Validation")

        for address, token in run.index.tokens.items():
            if not token.project:
                continue
            try:
                project_dir = safe_path_join(self.contracts_dir, token.project)
            except PathTraversalError as e:
                self._fail(
                    run,
                    ErrorCode.CROSS_REFERENCE_ERROR,
                    f"Token {token.symbol} has an invalid project reference: {e.message}",
                    subject=address,
                    project=token.project,
                )
                continue

            if not project_dir.is_dir():
                self._fail(
                    run,
                    ErrorCode.CROSS_REFERENCE_ERROR,
                    f"Token {token.symbol} references non-existent project: {token.project}",
                    subject=address,
                    project=token.project,
                )
            else:
                logger.info(f"Token {token.symbol} correctly references project: {token.project}")

        for address, ref in run.index.contracts.items():
            token = run.index.tokens.get(address)
            if token is None:
                continue
            if not token.project:
                self._fail(
                    run,
                    ErrorCode.CROSS_REFERENCE_ERROR,
                    f"Token {token.symbol} ({address}) has a contract in {ref.project} "
                    "but missing \"project\" field",
                    subject=address,
                    project=ref.project,
                )
            elif token.project != ref.project:
                self._fail(
                    run,
                    ErrorCode.CROSS_REFERENCE_ERROR,
                    f"Token {token.symbol} references project \"{token.project}\" "
                    f"but contract is in \"{ref.project}\"",
                    subject=address,
                    project=token.project,
                    contract_project=ref.project,
                )

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def summarize(self, run: ValidationRun) -> RunSummary:
        """Freeze the run into a RunSummary and log the statistics."""
        summary = RunSummary(
            tokens_validated=run.tokens_validated,
            projects_validated=run.projects_validated,
            contracts_validated=run.contracts_validated,
            unique_addresses=run.index.unique_count,
            findings=list(run.findings),
        )

        logger.info(
            f"Validation {summary.verdict.value}",
            extra={"context": summary.counts()},
        )
        return summary


def validate_registry(
    root: Union[str, Path],
    schema_dir: Optional[Union[str, Path]] = None,
    config: Optional[ValidationConfig] = None,
) -> RunSummary:
    """
    Compile schemas and validate a registry in one call.

    Raises:
        FatalError: schema load failure or limit exceeded
    """
    schemas = load_schemas(schema_dir)
    return RegistryValidator(root, schemas, config).run()
