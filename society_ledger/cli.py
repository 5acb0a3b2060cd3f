"""CLI entry point for the society ledger."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tempfile
from pathlib import Path

from dotenv import load_dotenv

from .config import LedgerConfig, load_config
from .currency import format_inr
from .db import InvoiceStore, ReceiptStore
from .errors import LedgerError, ValidationError
from .export import (
    artifact_name,
    restore,
    to_backup,
    to_csv,
    write_artifact,
    write_workbook,
)
from .models import DEFAULT_FEE_LABELS, ChequeDetails, InvoiceRecord, ReceiptRecord
from .search import search, total_collections
from .service import InvoiceLedger, ReceiptLedger

logger = logging.getLogger(__name__)


def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", help="Member name (શ્રી/શ્રીમતી)")
    parser.add_argument("--house", help="Block / house number, e.g. B-12")
    parser.add_argument("--payer", help="Paid through (હસ્તે)")
    parser.add_argument("--receipt-no", help="Override the suggested receipt number")
    parser.add_argument("--date", help="Receipt date as printed")
    parser.add_argument(
        "--amount", action="append", metavar="N=VALUE",
        help="Fee line amount, repeatable. N in print order: "
        + "; ".join(f"{i}={label}" for i, label in enumerate(DEFAULT_FEE_LABELS, 1)),
    )
    parser.add_argument("--cheque-date", help="Cheque date")
    parser.add_argument("--cheque-bank", help="Cheque bank")
    parser.add_argument("--pdf", metavar="FILE", help="Also render the saved receipt")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="society-ledger",
        description="Fee receipts and invoices for a co-operative housing society",
    )
    parser.add_argument("--config", "-c", default=None, help="Config file path (TOML)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # receipt
    receipt = sub.add_parser("receipt", help="Create and manage receipts")
    rsub = receipt.add_subparsers(dest="action")

    _add_draft_arguments(rsub.add_parser("add", help="Save a new receipt"))
    edit = rsub.add_parser("edit", help="Update an existing receipt")
    edit.add_argument("id", type=int)
    _add_draft_arguments(edit)
    copy = rsub.add_parser("copy", help="Save a copy of a receipt as a new one")
    copy.add_argument("id", type=int)
    _add_draft_arguments(copy)

    rlist = rsub.add_parser("list", help="List receipts, newest first")
    rlist.add_argument("--search", "-s", default="", help="Name, house or receipt no")
    rlist.add_argument("--json", action="store_true", help="Output JSON")

    rdel = rsub.add_parser("delete", help="Delete a receipt permanently")
    rdel.add_argument("id", type=int)
    rdel.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    rpdf = rsub.add_parser("pdf", help="Render a receipt as PDF")
    rpdf.add_argument("id", type=int)
    rpdf.add_argument("--out", "-o", default=None, metavar="FILE")
    rpdf.add_argument("--print", action="store_true", dest="do_print", help="Print it")
    rpdf.add_argument("--printer", default=None, help="Print on this printer")
    rpdf.add_argument("--copies", type=int, default=1)

    # invoice
    invoice = sub.add_parser("invoice", help="Record and manage invoices")
    isub = invoice.add_subparsers(dest="action")
    iadd = isub.add_parser("add", help="Save a new invoice")
    iadd.add_argument("--name", required=True, help="Customer name")
    iadd.add_argument("--amount", type=float, required=True)
    iadd.add_argument("--description", default="")
    ilist = isub.add_parser("list", help="List invoices")
    ilist.add_argument("--json", action="store_true", help="Output JSON")
    idel = isub.add_parser("delete", help="Delete an invoice permanently")
    idel.add_argument("id", type=int)
    idel.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    # export / backup / restore
    export = sub.add_parser("export", help="Export the ledger as CSV or XLSX")
    export.add_argument("format", choices=["csv", "xlsx"])
    backup = sub.add_parser("backup", help="Write a full JSON backup")
    for p in (export, backup):
        p.add_argument("--invoices", action="store_true", help="Invoices instead of receipts")
        p.add_argument("--out-dir", default=None, help="Output directory")

    rst = sub.add_parser("restore", help="Restore records from a JSON backup")
    rst.add_argument("file")
    rst.add_argument("--invoices", action="store_true", help="Restore invoices")

    sub.add_parser("printers", help="List available printers")

    tr = sub.add_parser("transform", help="Rewrite a legacy HTML snippet with Gemini")
    tr.add_argument("file", help="HTML file, or - for stdin")

    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None or (
        args.command in ("receipt", "invoice") and args.action is None
    ):
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    try:
        match args.command:
            case "receipt":
                _cmd_receipt(config, args)
            case "invoice":
                _cmd_invoice(config, args)
            case "export":
                _cmd_export(config, args)
            case "backup":
                _cmd_backup(config, args)
            case "restore":
                _cmd_restore(config, args)
            case "printers":
                _cmd_printers()
            case "transform":
                _cmd_transform(config, args)
    except LedgerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


# -- receipts ---------------------------------------------------------------


def _apply_draft_arguments(ledger: ReceiptLedger, args) -> None:
    draft = ledger.draft
    if args.name is not None:
        draft.customer_name = args.name
    if args.house is not None:
        draft.house_no = args.house
    if args.payer is not None:
        draft.payer_name = args.payer
    if args.receipt_no is not None:
        draft.receipt_no = args.receipt_no
    if args.date is not None:
        draft.date = args.date
    for option in args.amount or []:
        index, _, value = option.partition("=")
        try:
            position = int(index)
            amount = float(value)
        except ValueError:
            raise ValidationError(f"Invalid --amount {option!r}; expected N=VALUE")
        if not 1 <= position <= len(draft.items):
            raise ValidationError(
                f"Fee line must be between 1 and {len(draft.items)}: {position}"
            )
        ledger.set_amount(position - 1, amount)
    if args.cheque_date is not None or args.cheque_bank is not None:
        cheque = draft.cheque or ChequeDetails()
        if args.cheque_date is not None:
            cheque.date = args.cheque_date
        if args.cheque_bank is not None:
            cheque.bank = args.cheque_bank
        draft.cheque = cheque


def _print_receipts(records: list[ReceiptRecord]) -> None:
    if not records:
        print("The ledger is empty or no receipts match the search.")
        return
    for r in records:
        payer = r.payer_name or "Primary Member"
        print(
            f"  [{r.id:>4}] #{r.receipt_no:<6} {r.date:<16} {r.house_no:<8} "
            f"{r.customer_name} ({payer})  ₹{format_inr(r.total_amount)}"
        )
    print(f"\nTotal collections: ₹{format_inr(total_collections(records))}")


def _cmd_receipt(config: LedgerConfig, args) -> None:
    store = ReceiptStore(db_path=config.database.path)
    ledger = ReceiptLedger(store, fiscal_year=config.society.fiscal_year)
    try:
        match args.action:
            case "add" | "edit" | "copy":
                if args.action == "edit":
                    ledger.load_for_edit(args.id)
                elif args.action == "copy":
                    ledger.copy_as_new(args.id)
                _apply_draft_arguments(ledger, args)
                record = ledger.save()
                verb = "Updated" if args.action == "edit" else "Saved"
                print(f"{verb} receipt #{record.receipt_no} (id {record.id})")
                print(f"  ₹{format_inr(record.total_amount)}: {record.currency_words}")
                if args.pdf:
                    _render_pdf(config, record, Path(args.pdf))
            case "list":
                records = search(ledger.records, args.search)
                if args.json:
                    print(json.dumps(
                        [r.to_dict() for r in records], ensure_ascii=False, indent=2
                    ))
                else:
                    _print_receipts(records)
            case "delete":
                deleted = ledger.delete(
                    args.id,
                    confirm=lambda: args.yes or _confirm(
                        "Are you sure? This permanently deletes the ledger entry."
                    ),
                )
                print(f"Deleted receipt id {args.id}" if deleted else "Cancelled.")
            case "pdf":
                _cmd_receipt_pdf(config, store, args)
    finally:
        ledger.close()
        store.close()


def _render_pdf(config: LedgerConfig, record: ReceiptRecord, path: Path) -> bool:
    from .pdf import generate_receipt_pdf

    try:
        generate_receipt_pdf(record, path, config.society)
    except (ImportError, FileNotFoundError) as e:
        print(f"PDF error: {e}", file=sys.stderr)
        return False
    print(f"PDF saved: {path}")
    return True


def _cmd_receipt_pdf(config: LedgerConfig, store: ReceiptStore, args) -> None:
    record = store.get(args.id)
    do_print = args.do_print or args.printer or config.printer.enabled

    if args.out:
        pdf_path = Path(args.out)
    else:
        pdf_path = Path(tempfile.mkdtemp(prefix="receipt_")) / f"receipt_{record.receipt_no}.pdf"

    if not _render_pdf(config, record, pdf_path):
        sys.exit(1)

    if do_print:
        from .printer import print_receipt

        printer_name = args.printer or config.printer.printer_name or None
        try:
            print_receipt(pdf_path, printer_name=printer_name, copies=args.copies)
            print(f"Sent to {printer_name or 'default printer'}")
        except RuntimeError as e:
            print(f"Print error: {e}", file=sys.stderr)

    if not args.out and pdf_path.exists():
        pdf_path.unlink()


# -- invoices ---------------------------------------------------------------


def _cmd_invoice(config: LedgerConfig, args) -> None:
    store = InvoiceStore(db_path=config.database.path)
    ledger = InvoiceLedger(store)
    try:
        match args.action:
            case "add":
                record = ledger.add(args.name, args.amount, args.description)
                print(f"Saved invoice #{record.id}: {record.currency_words}")
            case "list":
                records = sorted(store.get_all(), key=lambda r: r.id, reverse=True)
                if args.json:
                    print(json.dumps(
                        [r.to_dict() for r in records], ensure_ascii=False, indent=2
                    ))
                    return
                if not records:
                    print("No invoices recorded.")
                    return
                for r in records:
                    print(
                        f"  #{r.id:<4} {r.date:<16} {r.customer_name:<24} "
                        f"₹{format_inr(r.amount)}  {r.description}"
                    )
            case "delete":
                deleted = ledger.delete(
                    args.id,
                    confirm=lambda: args.yes or _confirm("Delete this invoice?"),
                )
                print(f"Deleted invoice #{args.id}" if deleted else "Cancelled.")
    finally:
        store.close()


# -- export / backup / restore ----------------------------------------------


def _open_store(config: LedgerConfig, invoices: bool):
    if invoices:
        return InvoiceStore(db_path=config.database.path), InvoiceRecord
    return ReceiptStore(db_path=config.database.path), ReceiptRecord


def _cmd_export(config: LedgerConfig, args) -> None:
    store, kind = _open_store(config, args.invoices)
    try:
        records = store.get_all()
    finally:
        store.close()

    out_dir = Path(args.out_dir or config.export.output_dir).expanduser()
    prefix = "Invoices" if args.invoices else "Society_Ledger"

    if args.format == "csv":
        path = write_artifact(out_dir, artifact_name(prefix, "csv"), to_csv(records, kind))
    else:
        try:
            path = write_workbook(records, out_dir / artifact_name(prefix, "xlsx"), kind)
        except ImportError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
    print(f"Exported {len(records)} records to {path}")


def _cmd_backup(config: LedgerConfig, args) -> None:
    store, _ = _open_store(config, args.invoices)
    try:
        records = store.get_all()
    finally:
        store.close()

    out_dir = Path(args.out_dir or config.export.output_dir).expanduser()
    prefix = "Invoices_Backup" if args.invoices else "Society_Backup"
    path = write_artifact(out_dir, artifact_name(prefix, "json"), to_backup(records))
    print(f"Backed up {len(records)} records to {path}")


def _cmd_restore(config: LedgerConfig, args) -> None:
    payload = Path(args.file).read_text(encoding="utf-8")
    store, _ = _open_store(config, args.invoices)
    try:
        count = restore(store, payload)
    finally:
        store.close()
    print(f"Restore complete: {count} records added.")


# -- misc -------------------------------------------------------------------


def _cmd_printers() -> None:
    from .printer import list_printers

    try:
        printers = list_printers()
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if not printers:
        print("No printers found.")
        return
    print(f"Available printers: {len(printers)}")
    for p in printers:
        default_mark = " (default)" if p.is_default else ""
        print(f"  {p.name}{default_mark}")


def _cmd_transform(config: LedgerConfig, args) -> None:
    from .transform import GeminiTextTransformer

    if args.file == "-":
        snippet = sys.stdin.read()
    else:
        snippet = Path(args.file).read_text(encoding="utf-8")

    transformer = GeminiTextTransformer(
        api_key=config.gemini.api_key,
        model=config.gemini.model,
    )
    try:
        print(transformer.transform(snippet))
    except (ValueError, ImportError) as e:
        print(f"Transform error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
