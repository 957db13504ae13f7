"""Interactive text menu over the record service."""

from __future__ import annotations

from typing import Callable

from vault.services.record_service import RecordService, VaultError
from vault.services import report_service

MENU_OPTIONS = [
    ("1", "View Records"),
    ("2", "Add Record"),
    ("3", "Update Record"),
    ("4", "Delete Record"),
    ("5", "Search Records"),
    ("6", "Sort Records"),
    ("7", "Export Data"),
    ("8", "View Vault Statistics"),
    ("9", "Exit"),
]
FAREWELL = "Thank you for using Secure Data Vault!"


class MenuController:
    """
    Blocking read-dispatch loop.

    ``read_line`` is called with a prompt and must return one line of input
    (``input`` by default). Operations catch VaultError themselves, so only
    Exit, end of input and Ctrl-C leave the loop.
    """

    def __init__(self, service: RecordService, read_line: Callable[[str], str] = input) -> None:
        self.service = service
        self.read_line = read_line
        self.handlers: dict[str, Callable[[], None]] = {
            "1": self.view_records,
            "2": self.add_record,
            "3": self.update_record,
            "4": self.delete_record,
            "5": self.search_records,
            "6": self.sort_records,
            "7": self.export_data,
            "8": self.view_statistics,
            "9": self.exit,
        }

    def ask(self, prompt: str) -> str:
        return self.read_line(prompt).strip()

    def show_menu(self) -> None:
        print("\n=== Enhanced Menu ===")
        for key, label in MENU_OPTIONS:
            print(f"{key}. {label}")

    def run(self) -> None:
        while True:
            self.show_menu()
            try:
                choice = self.ask("\nChoose an option (1-9): ")
            except (EOFError, KeyboardInterrupt):
                print()
                self.exit()
            self.dispatch(choice)

    def dispatch(self, choice: str) -> None:
        handler = self.handlers.get(choice)
        if handler is None:
            print("Invalid option. Please choose 1-9.")
            return
        try:
            handler()
        except VaultError as exc:
            print(f"Error: {exc.message}")
        except (EOFError, KeyboardInterrupt):
            print()
            self.exit()

    def _print_records(self, records) -> None:
        if not records:
            print(report_service.NO_RECORDS_MESSAGE)
            return
        for line in report_service.format_records(records):
            print(line)

    # -------------------------------------- operations --------------------------------------
    def view_records(self) -> None:
        print("\n=== View Records ===")
        self._print_records(self.service.list_records())

    def add_record(self) -> None:
        print("\n=== Add New Record ===")
        record_id = self.ask("Enter ID (leave blank for automatic): ")
        name = self.ask("Enter Name: ")
        record = self.service.add_record(name, record_id=record_id or None)
        print(f"Record added successfully! (ID: {record.id})")

    def update_record(self) -> None:
        print("\n=== Update Record ===")
        token = self.ask("Enter ID or name of the record to update: ")
        record = self.service.resolve(token)
        print(report_service.format_record_line(1, record))
        name = self.ask("Enter new name: ")
        updated = self.service.update_record(record.id, name)
        print(f"Record {updated.id} renamed to '{updated.name}'.")

    def delete_record(self) -> None:
        print("\n=== Delete Record ===")
        token = self.ask("Enter ID or name of the record to delete: ")
        record = self.service.resolve(token)
        print(report_service.format_record_line(1, record))
        answer = self.ask("Are you sure you want to delete this record? (yes/no): ").lower()
        if answer not in ("y", "yes"):
            print("Deletion cancelled.")
            return
        self.service.delete_record(record.id)
        print("Record deleted successfully!")

    def search_records(self) -> None:
        print("\n=== Search Records ===")
        keyword = self.ask("Enter search keyword: ")
        matches = self.service.search(keyword)
        if matches:
            print(f"Found {len(matches)} matching records:")
        self._print_records(matches)

    def sort_records(self) -> None:
        print("\n=== Sort Records ===")
        field = self.ask("Sort by (name/date): ")
        order = self.ask("Order (asc/desc): ")
        result = self.service.sort_records(field, order)
        if result.warning:
            print(result.warning)
        print("Sorted Records:")
        self._print_records(result.records)

    def export_data(self) -> None:
        print("\n=== Export Data ===")
        path = self.service.export()
        print(f"Data exported successfully to {path}")

    def view_statistics(self) -> None:
        print("\n=== Vault Statistics ===")
        for line in report_service.render_stats(self.service.statistics()):
            print(line)

    def exit(self) -> None:
        print(f"\n{FAREWELL}")
        raise SystemExit(0)
