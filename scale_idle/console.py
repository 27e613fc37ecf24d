# Developer console: text commands against a running Game

import logging

from .actions import ACTIONS, refresh_gated_unlocks
from .bignum import parse_decimal, format_distance, format_mass
from .persistence import SAVE_FIELDS, apply_offline_progress
from .state import clamp_tick_rate, clamp_auto_save_interval

FIELD_KINDS = {attr: kind for _, attr, kind in SAVE_FIELDS}
TRUE_WORDS = ['true', '1', 't', 'y', 'yes']

def _convert(kind, val_s):
    if kind == 'bool': return val_s.lower() in TRUE_WORDS
    if kind == 'int':
        value = int(float(val_s))
        if value < 0: raise ValueError("levels cannot be negative")
        return value
    if kind == 'tick_rate': return clamp_tick_rate(val_s)
    if kind == 'auto_save_interval': return clamp_auto_save_interval(val_s)
    return parse_decimal(val_s)

def cmd_help(game, args):
    lines = ["Commands:"]
    for name, handler in COMMAND_HANDLERS.items(): lines.append(f"  {name:<10} {handler['help']}")
    return "\n".join(lines)

def cmd_get(game, args):
    if len(args) != 1: return "Usage: get <field>"
    snap = game.snapshot(); var = args[0].lower()
    if var not in snap: return f"Error: Field '{args[0]}' not found."
    val = snap[var]
    return f"{var} ({type(val).__name__}) = {val}"

def cmd_list(game, args):
    filter_term = args[0].lower() if args else None; lines = []
    for key, value in sorted(game.snapshot().items()):
        if filter_term and filter_term not in key: continue
        lines.append(f"  {key} = {value}")
    if not lines: return "No fields found matching filter."
    return "\n".join(lines)

def cmd_set(game, args):
    if len(args) != 2: return "Usage: set <field> <value>"
    var, val_s = args[0].lower(), args[1]
    kind = FIELD_KINDS.get(var)
    if kind is None: return f"Error: Field '{var}' not found or not settable."
    try: new_value = _convert(kind, val_s)
    except ValueError as e: return f"Error parsing value '{val_s}' for '{var}': {e}"
    setattr(game.state, var, new_value)
    refresh_gated_unlocks(game.state)
    return f"Set {var} to {new_value}."

def cmd_offline(game, args):
    if len(args) != 1: return "Usage: offline <seconds>"
    try: seconds = parse_decimal(args[0])
    except ValueError as e: return f"Offline Err: Invalid input - {e}"
    distance_gain, mass_gain = apply_offline_progress(game.state, seconds)
    return f"Simulated {seconds}s offline. Gained +{format_distance(distance_gain)}, +{format_mass(mass_gain)}."

def cmd_tickrate(game, args):
    if len(args) != 1: return "Usage: tickrate <10-60>"
    return f"Tick rate set to {game.set_tick_rate(args[0])}/s."

def cmd_autosave(game, args):
    if len(args) != 1: return "Usage: autosave <1-60>"
    return f"Autosave interval set to {game.set_auto_save_interval(args[0])}s."

def cmd_buy(game, args):
    if not args or len(args) > 2: return "Usage: buy <action> [times]"
    item_id = args[0].lower()
    if item_id not in ACTIONS: return f"Error: Unknown action '{item_id}'. Options: {', '.join(ACTIONS)}"
    try: times_to_buy = int(args[1]) if len(args) == 2 else 1
    except ValueError: return f"Error: Invalid count '{args[1]}'."
    succeeded_count = 0
    for _ in range(max(0, times_to_buy)):
        if not game.perform(item_id): break
        succeeded_count += 1
    result = f"Attempted '{item_id}' x{times_to_buy}. Succeeded {succeeded_count} time(s)."
    if succeeded_count < times_to_buy: result += " Stopped: requirements not met."
    return result

def cmd_export(game, args): return game.export_save() or game.settings_message

def cmd_import(game, args):
    if len(args) != 1: return "Usage: import <save>"
    return game.import_save(args[0])

def cmd_save(game, args): return "Saved." if game.save() else "Save failed (see log)."

def cmd_hardreset(game, args):
    game.hard_reset()
    return "Save deleted and game reset."

COMMAND_HANDLERS = {
    'help': {'func': cmd_help, 'help': "List commands."},
    'get': {'func': cmd_get, 'help': "get <field> - show one snapshot value."},
    'list': {'func': cmd_list, 'help': "list [filter] - show snapshot values."},
    'set': {'func': cmd_set, 'help': "set <field> <value> - overwrite a state field."},
    'offline': {'func': cmd_offline, 'help': "offline <seconds> - apply offline progress."},
    'tickrate': {'func': cmd_tickrate, 'help': "tickrate <n> - ticks per second (10-60)."},
    'autosave': {'func': cmd_autosave, 'help': "autosave <n> - autosave interval in seconds (1-60)."},
    'buy': {'func': cmd_buy, 'help': "buy <action> [times] - run an action repeatedly."},
    'export': {'func': cmd_export, 'help': "Print the encoded save."},
    'import': {'func': cmd_import, 'help': "import <save> - load a raw or base64 JSON save."},
    'save': {'func': cmd_save, 'help': "Save now."},
    'hardreset': {'func': cmd_hardreset, 'help': "Delete the save and start over."},
}

def run_command(game, cmd_str):
    parts = (cmd_str or '').split()
    if not parts: return ""
    cmd, args = parts[0].lower(), parts[1:]
    handler = COMMAND_HANDLERS.get(cmd)
    if handler is None: return f"Unknown cmd: '{cmd}'. Type 'help'."
    try: return handler['func'](game, args)
    except Exception as e:
        logging.error(f"Console err '{cmd}': {e}", exc_info=True)
        return f"Exec Error '{cmd}': {e}"
