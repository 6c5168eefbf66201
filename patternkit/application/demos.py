"""Demonstrations for each catalogued pattern, registered in catalog order."""
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from patternkit.application.decorators import demo
from patternkit.config.schemas import AppConfig
from patternkit.domain.events import CommandEvent
from patternkit.domain.exceptions import AccessDeniedError, DomainException
from patternkit.patterns.builder import ComputerBuilder, LaptopBuilder
from patternkit.patterns.command import CommandHistory, CompositeCommand, CopyFile, CreateFile, DeleteFile
from patternkit.patterns.composite import MakeCakeTask
from patternkit.patterns.iterator import ArrayIterator, Portfolio, merge
from patternkit.patterns.mediator import ChatRoom, Colleague, EventMediator, User
from patternkit.patterns.observer import Employee, Payroll, TaxMan
from patternkit.patterns.proxy import (
    AccountProtectionProxy,
    BankAccount,
    LoopbackTransport,
    RemoteAccountProxy,
    VirtualAccountProxy,
)
from patternkit.patterns.strategy import FormattedReport, HTMLFormatter, PlainTextFormatter
from patternkit.patterns.template_method import HTMLReport, PlainTextReport

REPORT_TITLE = "Monthly Report"
REPORT_TEXT = ["Things are going", "really, really well."]


@demo("template-method")
def template_method_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    return {
        "html": HTMLReport(REPORT_TITLE, REPORT_TEXT).generate(),
        "plain": PlainTextReport(REPORT_TITLE, REPORT_TEXT).generate(),
    }


@demo("strategy")
def strategy_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    report = FormattedReport(REPORT_TITLE, REPORT_TEXT, HTMLFormatter())
    html_output = report.output_report()
    report.formatter = PlainTextFormatter()
    plain_output = report.output_report()
    report.formatter = lambda title, text: f"{title}: {' '.join(text)}"
    return {"html": html_output, "plain": plain_output, "callable": report.output_report()}


@demo("observer")
def observer_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    config = config or AppConfig()
    fred = Employee("Fred", "Crane Operator", 30000, error_policy=config.observer.error_policy)
    payroll = Payroll()
    tax_man = TaxMan()
    fred.add_observer(payroll)
    fred.add_observer(tax_man)

    fred.salary = 35000
    fred.promote("Crane Supervisor", 40000)

    return {
        "notifications": [list(entry) for entry in payroll.notifications],
        "tax_total": tax_man.total,
        "changes": [
            {"attribute": event.attribute, "old": event.old_value, "new": event.new_value}
            for event in fred.change_history
        ],
    }


@demo("proxy")
def proxy_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    current_user = {"name": "alice"}
    protected = AccountProtectionProxy(
        BankAccount(100), owner="alice", current_user_provider=lambda: current_user["name"]
    )
    protected.deposit(50)
    current_user["name"] = "mallory"
    try:
        protected.withdraw(10)
        denied: Optional[str] = None
    except AccessDeniedError as e:
        denied = str(e)

    virtual = VirtualAccountProxy(lambda: BankAccount(10))
    materialized_before = virtual.is_materialized
    virtual.deposit(5)

    transport = LoopbackTransport(BankAccount(500))
    remote = RemoteAccountProxy(transport)
    remote.withdraw(125)

    return {
        "protection": {"denied": denied},
        "virtual": {
            "materialized_before_use": materialized_before,
            "materialized_after_use": virtual.is_materialized,
            "balance": virtual.balance,
        },
        "remote": {
            "balance": remote.balance,
            "calls": [call.model_dump() for call in transport.calls],
        },
    }


@demo("builder")
def builder_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    desktop = ComputerBuilder().turbo().memory_size(4000).build_with("dvd_writer", "harddisk").computer()
    laptop = LaptopBuilder().add_dvd().add_hard_disk(200000).computer()
    try:
        ComputerBuilder().memory_size(128).computer()
        rejected: List[str] = []
    except DomainException as e:
        rejected = list(getattr(e, "problems", [str(e)]))
    return {
        "desktop": desktop.model_dump(mode="json"),
        "laptop": laptop.model_dump(mode="json"),
        "rejected": rejected,
    }


@demo("composite")
def composite_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    cake = MakeCakeTask()
    return {
        "total_minutes": cake.get_time_required(),
        "leaves": cake.total_leaf_count(),
        "tree": cake.to_dict(),
        "walk": [" / ".join(task.path()) for task in cake.walk()],
    }


@demo("iterator")
def iterator_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    merged = merge(ArrayIterator([1, 4, 9]), ArrayIterator([2, 3, 10]))
    portfolio = Portfolio([BankAccount(10), BankAccount(250), BankAccount(40)])
    rich_accounts: List[float] = []

    def collect_rich(account: BankAccount) -> None:
        if account.balance > 20:
            rich_accounts.append(account.balance)

    portfolio.each_account(collect_rich)
    return {
        "merged": merged,
        "internal": rich_accounts,
        "external": [account.balance for account in portfolio],
    }


@demo("command")
def command_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    config = config or AppConfig()
    events: List[CommandEvent] = []
    history = CommandHistory(max_length=config.command.history_length, listener=events.append)

    with tempfile.TemporaryDirectory() as workdir:
        root = Path(workdir)
        install = CompositeCommand(
            [
                CreateFile(root / "file1.txt", "hello world\n"),
                CopyFile(root / "file1.txt", root / "file2.txt"),
                DeleteFile(root / "file1.txt"),
            ],
            description="Install",
        )
        history.run(install)
        after_run = sorted(path.name for path in root.iterdir())
        history.undo()
        after_undo = sorted(path.name for path in root.iterdir())
        history.redo()
        after_redo = sorted(path.name for path in root.iterdir())

    return {
        "steps": install.description_lines,
        "after_run": after_run,
        "after_undo": after_undo,
        "after_redo": after_redo,
        "events": [event.action for event in events],
    }


@demo("mediator")
def mediator_demo(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    config = config or AppConfig()
    room = ChatRoom()
    alice, bob, carol = User("alice"), User("bob"), User("carol")
    for user in (alice, bob, carol):
        room.join(user)
    alice.say("hello everyone")
    bob.whisper("alice", "hi alice")

    mediator = EventMediator(strict=config.mediator.strict)
    audit: List[str] = []
    mediator.register("saved", lambda sender, payload: audit.append(f"{sender.name} saved {payload}"))
    Colleague("editor", mediator).send("saved", "chapter-1")

    return {
        "inboxes": {user.name: [list(message) for message in user.inbox] for user in (alice, bob, carol)},
        "audit": audit,
    }
