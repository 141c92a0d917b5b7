"""
Main Orchestrator for Design Ledger

This module ties the components together and defines what a logged-in
user can do:
1. Record entries (designer: charges, job giver: payments)
2. Manage the price list (designer only)
3. Share the ledger as a bridge link, and accept one from the other party

DESIGN DECISION: The store trusts whatever it is given. Attribution
(addedBy, timestamps, fresh ids) and role rules are applied here, in one
place, so the store stays a plain durable data structure.
"""

from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional

from design_ledger.agents import LedgerSummary, LedgerSummaryAgent
from design_ledger.audit import LedgerEventLogger
from design_ledger.auth import AccessGate, UserProfile
from design_ledger.bridge import (
    BridgePreview,
    build_bridge_link,
    extract_bridge_blob,
    preview,
)
from design_ledger.config import get_settings
from design_ledger.ledger import (
    ActivityItem,
    LedgerStore,
    compute_totals,
    recent_activity,
    render_text_report,
)
from design_ledger.models import (
    Charge,
    LedgerTotals,
    Payment,
    PriceTemplate,
    Role,
    generate_entry_id,
    now_millis,
)
from design_ledger.services.storage import create_storage
from design_ledger.sync import ChangeTransport, FileChannel, LocalChannel


class RoleNotAllowedError(Exception):
    """The logged-in user's role may not perform this action."""
    pass


class TemplateNotFoundError(Exception):
    """No price template with the given id."""
    pass


class LedgerSession:
    """
    Everything one logged-in user does to the ledger.

    Roles:
    - DESIGNER records charges and owns the price list
    - JOB_GIVER records payments
    Both can read, share and accept bridge links, and ask for a summary.
    """

    def __init__(
        self,
        store: LedgerStore,
        user: UserProfile,
        summary_agent: Optional[LedgerSummaryAgent] = None,
        bridge_param: str = "bridge",
        currency_label: str = "Rs.",
        activity_limit: int = 10,
    ):
        self._store = store
        self._user = user
        self._summary_agent = summary_agent
        self._bridge_param = bridge_param
        self._currency_label = currency_label
        self._activity_limit = activity_limit

    @property
    def user(self) -> UserProfile:
        return self._user

    def _require(self, role: Role, action: str) -> None:
        if self._user.role != role:
            raise RoleNotAllowedError(
                f"{self._user.name} ({self._user.role.value}) cannot {action}"
            )

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def record_charge(
        self,
        charge_type: str,
        amount: Decimal,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Charge:
        """Record a charge attributed to the logged-in designer."""
        self._require(Role.DESIGNER, "record charges")
        charge = Charge(
            id=generate_entry_id(),
            type=charge_type,
            amount=amount,
            entry_date=entry_date or date.today(),
            added_by=self._user.name,
            description=description,
            timestamp=now_millis(),
        )
        self._store.add_charge(charge)
        return charge

    def apply_template(self, template_id: str) -> tuple[str, Decimal]:
        """Pre-fill values (type, amount) for a new charge from a template."""
        for template in self._store.read().templates:
            if template.id == template_id:
                return template.name, template.amount
        raise TemplateNotFoundError(f"No price template with id {template_id!r}")

    def record_payment(
        self,
        method: str,
        amount: Decimal,
        note: str = "",
        entry_date: Optional[date] = None,
    ) -> Payment:
        """Record a payment attributed to the logged-in job giver."""
        self._require(Role.JOB_GIVER, "record payments")
        payment = Payment(
            id=generate_entry_id(),
            method=method,
            amount=amount,
            entry_date=entry_date or date.today(),
            added_by=self._user.name,
            note=note,
            timestamp=now_millis(),
        )
        self._store.add_payment(payment)
        return payment

    # -------------------------------------------------------------------------
    # Price list
    # -------------------------------------------------------------------------

    def add_template(self, name: str, amount: Decimal) -> PriceTemplate:
        """Add a preset price to the list."""
        self._require(Role.DESIGNER, "edit the price list")
        template = PriceTemplate(id=generate_entry_id(), name=name, amount=amount)
        templates = self._store.read().templates
        self._store.save_templates([*templates, template])
        return template

    def remove_template(self, template_id: str) -> bool:
        """Remove a preset price. Returns False if it was not in the list."""
        self._require(Role.DESIGNER, "edit the price list")
        templates = self._store.read().templates
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            return False
        self._store.save_templates(remaining)
        return True

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def totals(self) -> LedgerTotals:
        return compute_totals(self._store.read())

    def activity(self) -> list[ActivityItem]:
        return recent_activity(self._store.read(), limit=self._activity_limit)

    def report(self) -> str:
        return render_text_report(self.totals(), currency_label=self._currency_label)

    async def summary(self) -> LedgerSummary:
        """AI summary of the ledger; unavailable if no agent is configured."""
        if self._summary_agent is None:
            self._summary_agent = LedgerSummaryAgent(
                currency_label=self._currency_label,
                audit_logger=self._store.audit_logger,
            )
        return await self._summary_agent.summarize(self._store.read())

    # -------------------------------------------------------------------------
    # Bridge links
    # -------------------------------------------------------------------------

    def share_link(self, base_url: str) -> str:
        """A link the other party can open to receive this ledger."""
        return build_bridge_link(base_url, self._store.export_data(), self._bridge_param)

    def inspect_link(self, url: str) -> Optional[BridgePreview]:
        """What an incoming link would import, or None if it carries nothing usable."""
        blob = extract_bridge_blob(url, self._bridge_param)
        if blob is None:
            return None
        return preview(blob)

    def accept_link(self, url: str) -> bool:
        """Replace the local ledger with the one carried by a link."""
        blob = extract_bridge_blob(url, self._bridge_param)
        if blob is None:
            self._store.audit_logger.log_import_rejected("Link carries no bridge parameter")
            return False
        return self._store.import_data(blob)


class AppComponents(NamedTuple):
    store: LedgerStore
    gate: AccessGate
    transport: Optional[ChangeTransport]


def create_app_components(
    start_sync: bool = True,
    audit_logger: Optional[LedgerEventLogger] = None,
) -> AppComponents:
    """
    Create all application components from settings.

    The file backend is paired with a FileChannel in the same data
    directory so separate processes see each other's changes; the memory
    backend gets an in-process LocalChannel; Google Sheets has no change
    signal and relies on re-reading.
    """
    settings = get_settings()
    storage_settings = settings.storage
    ledger_settings = settings.ledger

    storage = create_storage(storage_settings)

    transport: Optional[ChangeTransport] = None
    if storage_settings.backend == "file":
        transport = FileChannel(
            storage_settings.data_dir / f"{storage_settings.channel_name}.signal",
            poll_interval=storage_settings.poll_interval_seconds,
        )
        if start_sync:
            transport.start()
    elif storage_settings.backend == "memory":
        transport = LocalChannel(storage_settings.channel_name)

    store = LedgerStore(
        storage=storage,
        transport=transport,
        storage_key=storage_settings.storage_key,
        security_log_limit=ledger_settings.security_log_limit,
        audit_logger=audit_logger,
    )
    gate = AccessGate(store, settings.auth.users)
    return AppComponents(store=store, gate=gate, transport=transport)


def open_session(
    components: AppComponents,
    user: UserProfile,
    summary_agent: Optional[LedgerSummaryAgent] = None,
) -> LedgerSession:
    """Start a session for a logged-in user with settings-driven defaults."""
    ledger_settings = get_settings().ledger
    return LedgerSession(
        store=components.store,
        user=user,
        summary_agent=summary_agent,
        bridge_param=ledger_settings.bridge_param,
        currency_label=ledger_settings.currency_label,
        activity_limit=ledger_settings.activity_limit,
    )
