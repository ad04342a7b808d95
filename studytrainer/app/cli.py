from __future__ import annotations

"""CLI for studytrainer using SessionManager and the module registry."""

import argparse
from pathlib import Path
from typing import Any

from storage.records import RecordStore
from storage.store import export_ndjson, load_sessions, query_trend

from ..config.config import load_config, validate_config
from ..drills.flashcards import DeckStore
from ..drills.geometry import explore
from ..drills.periodic_table import filter_elements
from ..stats.stats import format_summary
from ..theory import units
from ..util.randomness import seed_if_needed

from .module_registry import game_center, get_module
from .persistence import make_repository
from .session_manager import SessionManager


def _build_ui() -> dict[str, Any]:
    def ask(prompt: str) -> str:
        try:
            return input(prompt)
        except EOFError:
            return "q"

    def inform(msg: str) -> None:
        print(msg)

    return {"ask": ask, "inform": inform}


def _records(cfg: dict) -> RecordStore:
    storage = cfg.get("storage", {})
    if storage.get("backend") == "memory":
        return RecordStore()
    return RecordStore(storage.get("records_path"))


def _fmt_record(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def _cmd_list_modules(args) -> int:
    cfg = validate_config(load_config(args.config))
    for row in game_center(_records(cfg)):
        m = get_module(row["id"])
        print(f"{m.id}: {m.name} - {m.description} | presets: {', '.join(m.presets.keys())}")
        recs = ", ".join(f"{k}: {_fmt_record(v)}" for k, v in row["records"].items())
        if recs:
            print(f"    {recs}")
    print("tools: convert (unit converter), geometry (shape explorer), elements (periodic table explorer)")
    return 0


def _cmd_run(args) -> int:
    seed_if_needed()
    if args.explain:
        from .explain import enable as explain_enable
        explain_enable(True)
    cfg = validate_config(load_config(args.config))
    sm = SessionManager(cfg)
    overrides: dict[str, Any] = {
        "questions": args.questions,
        "mode": args.mode,
        "difficulty": args.difficulty,
        "category": args.category,
        "direction": args.direction,
        "grade": args.grade,
        "deck": args.deck,
    }
    sm.start_session(args.module, args.preset, overrides, seed=args.seed)
    summary = sm.run(_build_ui())
    if cfg.get("session", {}).get("show_summary", True):
        print("\nSession Summary:")
        print(f"Score: {summary['score']}  Correct: {summary['correct']}/{summary['total']} "
              f"({summary['percent']:.0f}%)  Best streak: {summary['best_streak']}")
        for rec in summary["extra"].get("new_records", []):
            print(f"New record: {rec}")
        if sm.drill is not None and summary["total"]:
            print(format_summary(sm.drill.stats))
    return 0


def _cmd_convert(args) -> int:
    cfg = validate_config(load_config(args.config))
    records = _records(cfg)
    if args.history:
        for e in records.get_list("units.history"):
            print(f"{e['date']}: {units.format_result(e['from_value'])} {e['from_unit']} = "
                  f"{units.format_result(e['to_value'])} {e['to_unit']}")
        return 0
    if args.value is None or args.src is None or args.dst is None:
        print("convert needs VALUE FROM TO (or --history)")
        return 2
    src = units.find_unit(args.category, args.src)
    dst = units.find_unit(args.category, args.dst)
    result = units.convert(args.value, src, dst, args.category)
    print(f"{units.format_result(args.value)} {src.symbol} = {units.format_result(result)} {dst.symbol}")
    print(units.formula_description(src, dst, args.category))
    units.save_conversion(records, units.conversion_record(args.category, args.value, src, dst, result))
    records.save()
    return 0


def _cmd_geometry(args) -> int:
    for line in explore(args.shape, args.dims):
        print(line)
    return 0


def _cmd_elements(args) -> int:
    for e in filter_elements(args.category, args.query or ""):
        print(f"{e.number:>3} {e.symbol:<3} {e.name:<14} {e.category} ({e.state}) mass {e.mass}")
    return 0


def _cmd_cards(args) -> int:
    cfg = validate_config(load_config(args.config))
    records = _records(cfg)
    decks = DeckStore(make_repository(cfg), records)
    if args.cards_cmd == "list":
        all_decks = decks.list_decks() or decks.seed_samples()
        for d in all_decks:
            if args.deck and args.deck.lower() not in (d.id, d.title.lower()):
                continue
            counts = ", ".join(f"{k} {v}" for k, v in d.counts().items())
            print(f"{d.id}: {d.title} [{d.subject}] {len(d.cards)} cards, "
                  f"{d.mastery_percentage:.0f}% mastered ({counts})")
            if args.deck:
                for c in d.cards:
                    print(f"    {c.front} -> {c.back}")
        return 0
    if args.cards_cmd == "add":
        try:
            deck = decks.find(args.deck)
        except KeyError:
            deck = decks.create(args.deck, args.subject or "")
        card = deck.add_card(args.front, args.back)
        decks.save(deck)
        print(f"Added card {card.id} to {deck.title} ({len(deck.cards)} cards)")
        return 0
    if args.cards_cmd == "remove":
        deck = decks.find(args.deck)
        deck.remove_card(args.card_id)
        decks.save(deck)
        print(f"Removed card {args.card_id} from {deck.title}")
        return 0
    return 2


def _cmd_stats(args) -> int:
    cfg = validate_config(load_config(args.config))
    data_dir = Path(cfg["storage"]["data_dir"])
    df = load_sessions(data_dir)
    if args.module:
        df = query_trend(df, module=args.module, mode=args.mode)
    if df.empty:
        print("No sessions recorded yet.")
        return 0
    summary = df.groupby("module", observed=True).agg(
        sessions=("session_id", "count"), answered=("Q", "sum"), correct=("C", "sum"), acc=("acc", "mean"),
    )
    print(summary.to_string())
    if args.export:
        export_ndjson(df, Path(args.export))
        print(f"Exported {len(df)} rows to {args.export}")
    if args.plot:
        from analytics.report import build_report
        written = build_report(data_dir, Path(args.out))
        print(f"Reports saved to: {Path(args.out).resolve()} ({len(written)} files)")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="studytrainer")
    sub = p.add_subparsers(dest="cmd", required=True)

    lm = sub.add_parser("list-modules")
    lm.add_argument("--config", default=None)

    sp = sub.add_parser("show-params")
    sp.add_argument("--module", required=True)
    sp.add_argument("--preset", default=None)

    rp = sub.add_parser("run")
    rp.add_argument("--config", default=None)
    rp.add_argument("--module", required=True)
    rp.add_argument("--preset", default="default")
    rp.add_argument("--questions", type=int, default=None)
    rp.add_argument("--seed", type=int, default=None)
    rp.add_argument("--mode", default=None)
    rp.add_argument("--difficulty", default=None)
    rp.add_argument("--category", default=None, help="Vocabulary category id")
    rp.add_argument("--direction", default=None, choices=["fr_en", "en_fr"])
    rp.add_argument("--grade", default=None, help="Spelling grade range id")
    rp.add_argument("--deck", default=None, help="Flashcard deck id or title")
    rp.add_argument("--explain", action="store_true")

    cp = sub.add_parser("convert")
    cp.add_argument("value", type=float, nargs="?")
    cp.add_argument("src", nargs="?")
    cp.add_argument("dst", nargs="?")
    cp.add_argument("--category", default="length", choices=sorted(units.CATEGORIES))
    cp.add_argument("--history", action="store_true")
    cp.add_argument("--config", default=None)

    gp = sub.add_parser("geometry")
    gp.add_argument("shape")
    gp.add_argument("dims", type=float, nargs="*")

    ep = sub.add_parser("elements")
    ep.add_argument("--category", default=None)
    ep.add_argument("--query", default=None)

    kp = sub.add_parser("cards")
    kp.add_argument("--config", default=None)
    ksub = kp.add_subparsers(dest="cards_cmd", required=True)
    kl = ksub.add_parser("list")
    kl.add_argument("--deck", default=None)
    ka = ksub.add_parser("add")
    ka.add_argument("--deck", required=True)
    ka.add_argument("--subject", default=None)
    ka.add_argument("--front", required=True)
    ka.add_argument("--back", required=True)
    kr = ksub.add_parser("remove")
    kr.add_argument("--deck", required=True)
    kr.add_argument("--card-id", dest="card_id", required=True)

    tp = sub.add_parser("stats")
    tp.add_argument("--config", default=None)
    tp.add_argument("--module", default=None)
    tp.add_argument("--mode", default=None)
    tp.add_argument("--export", default=None, help="Write the selected rows as NDJSON")
    tp.add_argument("--plot", action="store_true")
    tp.add_argument("--out", default="reports")

    args = p.parse_args(argv)

    if args.cmd == "list-modules":
        return _cmd_list_modules(args)

    if args.cmd == "show-params":
        m = get_module(args.module)
        print(f"Module {m.id}: {m.name}")
        print(f"Parameters: {', '.join(m.parameters_schema.get('properties', {}).keys())}")
        print("Presets:")
        for name, params in m.presets.items():
            if args.preset and name != args.preset:
                continue
            print(f"  - {name}: {params}")
        return 0

    if args.cmd == "run":
        return _cmd_run(args)
    if args.cmd == "convert":
        return _cmd_convert(args)
    if args.cmd == "geometry":
        return _cmd_geometry(args)
    if args.cmd == "elements":
        return _cmd_elements(args)
    if args.cmd == "cards":
        return _cmd_cards(args)
    if args.cmd == "stats":
        return _cmd_stats(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
