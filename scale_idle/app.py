# Desktop host: ttkbootstrap window that drives Game.frame() and renders snapshots

import logging
import tkinter as tk
from tkinter import messagebox

import ttkbootstrap as ttk
from ttkbootstrap.constants import *
from ttkbootstrap.scrolled import ScrolledText

from .bignum import format_distance, format_mass, to_precision
from .config import GAME_VERSION, FRAME_INTERVAL_MS, MIN_TICK_RATE, MAX_TICK_RATE, \
    MIN_AUTOSAVE_INTERVAL_S, MAX_AUTOSAVE_INTERVAL_S, DEVELOPER_MODE
from .console import run_command

GRID_KEYS = ('sticky', 'padx', 'pady', 'columnspan', 'rowspan')
UPGRADE_BUTTON_WIDTH = 8

def obfuscate(tab_name):
    # Letters and digits only; padding survives
    return ''.join('?' if c.isalnum() else c for c in tab_name)

def _grid(widget, row, col, opts, sticky, pady):
    opts.setdefault('sticky', sticky); opts.setdefault('padx', 5); opts.setdefault('pady', pady)
    widget.grid(row=row, column=col, **opts)
    return widget

def _split_grid_opts(kwargs):
    return {k: kwargs.pop(k) for k in GRID_KEYS if k in kwargs}

def create_label(parent, text, row, col, **kwargs):
    grid_opts = _split_grid_opts(kwargs)
    return _grid(ttk.Label(parent, text=text, **kwargs), row, col, grid_opts, 'w', 2)

def create_button(parent, text, command, row, col, **kwargs):
    grid_opts = _split_grid_opts(kwargs)
    kwargs.setdefault('bootstyle', 'primary-outline'); kwargs.setdefault('width', UPGRADE_BUTTON_WIDTH)
    return _grid(ttk.Button(parent, text=text, command=command, **kwargs), row, col, grid_opts, 'ew', 5)

def update_button_style(btn, state):
    if not btn: return
    try:
        style = "primary-outline"; tk_state = tk.NORMAL
        if state == "maxed": style = "secondary-outline"; tk_state = tk.DISABLED
        elif state == "buyable": style = "success"
        elif state == "locked": style = "secondary-outline"; tk_state = tk.DISABLED
        elif state == "default": tk_state = tk.DISABLED
        btn.configure(bootstyle=style, state=tk_state)
    except tk.TclError: pass

class GameWindow:
    def __init__(self, game, themename="darkly"):
        self.game = game
        self.is_running = True
        self.window = ttk.Window(themename=themename); self.window.title("Scale"); self.window.geometry("820x560")
        self.window.grid_rowconfigure(0, weight=1); self.window.grid_columnconfigure(0, weight=1)
        self.notebook = ttk.Notebook(self.window, bootstyle="primary")
        self.notebook.grid(row=0, column=0, sticky='nsew', padx=10, pady=10)
        self.tab_frames = []
        self.rows = {}
        self._build_main(self._add_tab(" Main ", lambda s: True))
        self._build_upgrades(self._add_tab(" Upgrades ", lambda s: True))
        self._build_scale(self._add_tab(" Scale ", lambda s: s['scale_upgrades_unlocked']))
        self._build_dimensions(self._add_tab(" Dimensions ", lambda s: s['dimensions_tab_unlocked']))
        self._build_settings(self._add_tab(" Settings ", lambda s: True))
        if DEVELOPER_MODE: self._build_console(self._add_tab(" Console ", lambda s: True))
        self.window.protocol("WM_DELETE_WINDOW", self.on_closing)

    def _add_tab(self, name, unlock_check):
        frame = ttk.Frame(self.notebook, padding=(20, 10)); frame.grid_columnconfigure(1, weight=1)
        self.notebook.add(frame, text=name)
        self.tab_frames.append((frame, unlock_check, name))
        return frame

    def _upgrade_row(self, parent, key, title, command, row):
        create_label(parent, title, row, 0, sticky='e', font=('-weight', 'bold'))
        cst = create_label(parent, "...", row, 1)
        btn = create_button(parent, "Buy", command, row, 2)
        eff = create_label(parent, "...", row + 1, 1, columnspan=2)
        self.rows[key] = (cst, eff, btn)

    # --- Tabs ---
    def _build_main(self, f):
        self.distance_lbl = create_label(f, "...", 0, 0, columnspan=3, font=('-size', 16, '-weight', 'bold'))
        self.rate_lbl = create_label(f, "...", 1, 0, columnspan=3)
        self.sp_lbl = create_label(f, "...", 2, 0, columnspan=3)
        self.mass_lbl = create_label(f, "", 3, 0, columnspan=3)
        ttk.Separator(f, orient=HORIZONTAL).grid(row=4, column=0, columnspan=3, sticky='ew', pady=10)
        self.prestige_btn = create_button(f, "Unit Collapse", self.game.unit_collapse, 5, 0, columnspan=3)
        self.dim_collapse_btn = create_button(f, "Dimension Collapse", self.game.dimension_collapse, 6, 0, columnspan=3, bootstyle="danger-outline")

    def _build_upgrades(self, f):
        self._upgrade_row(f, 'velocity', "Velocity:", self.game.buy_velocity, 0)
        self._upgrade_row(f, 'acceleration', "Acceleration:", self.game.buy_acceleration, 2)
        self._upgrade_row(f, 'compression', "Compression:", self.game.buy_compression, 4)
        self._upgrade_row(f, 'mass_velocity', "Mass Velocity:", self.game.buy_mass_velocity, 6)

    def _build_scale(self, f):
        specs = [
            ('mass_generation_unlocked', "Mass Generation (1 SP)", self.game.unlock_mass_generation),
            ('auto_upgrade_unlocked', "Auto-Upgrade (1 SP)", self.game.unlock_auto_upgrade),
            ('triple_mass_unlocked', "Triple Mass (5 SP)", self.game.unlock_triple_mass),
            ('persistent_mass_upgrades', "Persistent Mass Upgrades (15 SP)", self.game.unlock_persistent_mass),
            ('dimension_collapse_unlocked', "Unlock Dimension Collapse (25 SP)", self.game.unlock_dimension_collapse),
        ]
        self.scale_btns = {}
        for i, (flag, text, command) in enumerate(specs):
            self.scale_btns[flag] = (create_button(f, text, command, i, 0, columnspan=3, width=30), text)

    def _build_dimensions(self, f):
        self.dp_lbl = create_label(f, "...", 0, 0, columnspan=3, font=('-weight', 'bold'))
        self._upgrade_row(f, 'dimension', "Dimension:", self.game.buy_dimension, 1)
        self.enhanced_btn = create_button(f, "Enhanced Dimensions (1 t mass)", self.game.unlock_enhanced_dimensions, 3, 0, columnspan=3)

    def _build_settings(self, f):
        create_label(f, f"Version: {GAME_VERSION}", 0, 0, columnspan=3)
        create_label(f, "Tick rate:", 1, 0, sticky='e')
        self.tick_var = tk.IntVar(value=self.game.state.tick_rate)
        ttk.Scale(f, from_=MIN_TICK_RATE, to=MAX_TICK_RATE, variable=self.tick_var,
                  command=lambda v: self.game.set_tick_rate(v)).grid(row=1, column=1, sticky='ew', padx=5)
        self.tick_lbl = create_label(f, "", 1, 2)
        create_label(f, "Autosave (s):", 2, 0, sticky='e')
        self.autosave_var = tk.IntVar(value=self.game.state.auto_save_interval)
        ttk.Scale(f, from_=MIN_AUTOSAVE_INTERVAL_S, to=MAX_AUTOSAVE_INTERVAL_S, variable=self.autosave_var,
                  command=lambda v: self.game.set_auto_save_interval(v)).grid(row=2, column=1, sticky='ew', padx=5)
        self.autosave_lbl = create_label(f, "", 2, 2)
        self.export_box = ScrolledText(f, height=4, wrap=tk.WORD, autohide=True)
        self.export_box.grid(row=3, column=0, columnspan=2, sticky='ew', pady=5)
        create_button(f, "Export", self.on_export, 3, 2)
        self.import_box = ScrolledText(f, height=4, wrap=tk.WORD, autohide=True)
        self.import_box.grid(row=4, column=0, columnspan=2, sticky='ew', pady=5)
        create_button(f, "Import", self.on_import, 4, 2)
        self.settings_lbl = create_label(f, "", 5, 0, columnspan=3)
        create_button(f, "Hard Reset", self.on_hard_reset, 6, 0, columnspan=3, bootstyle="danger")

    def _build_console(self, f):
        f.grid_rowconfigure(0, weight=1)
        self.console_out = ScrolledText(f, height=12, wrap=tk.WORD, autohide=True)
        self.console_out.grid(row=0, column=0, columnspan=3, sticky='nsew')
        self.console_entry = ttk.Entry(f); self.console_entry.grid(row=1, column=0, columnspan=3, sticky='ew', pady=5)
        self.console_entry.bind("<Return>", self.on_console)

    # --- Settings Handlers ---
    def on_export(self):
        raw = self.game.export_save()
        self.export_box.delete('1.0', tk.END); self.export_box.insert('1.0', raw)

    def on_import(self):
        self.game.import_save(self.import_box.get('1.0', tk.END))
        self.tick_var.set(self.game.state.tick_rate); self.autosave_var.set(self.game.state.auto_save_interval)

    def on_hard_reset(self):
        if messagebox.askyesno("Hard Reset", "Are you sure? This will delete all progress!"):
            self.game.hard_reset()

    def on_console(self, event=None):
        cmd = self.console_entry.get(); self.console_entry.delete(0, tk.END)
        res = run_command(self.game, cmd)
        self.console_out.insert(tk.END, f"> {cmd}\n{res}\n"); self.console_out.see(tk.END)

    # --- Render ---
    def render(self):
        s = self.game.snapshot()
        for i, (frame, unlock_check, name) in enumerate(self.tab_frames):
            self.notebook.tab(i, text=name if unlock_check(s) else obfuscate(name))

        self.distance_lbl.configure(text=format_distance(s['distance']))
        self.rate_lbl.configure(text=f"+{format_distance(s['distance_rate'])} / sec")
        self.sp_lbl.configure(text=f"Scale Points: {s['scale_points']}")
        self.mass_lbl.configure(text=f"{format_mass(s['mass'])} (+{format_mass(s['mass_rate'])} / sec)" if s['mass_unlocked'] else "")
        self.prestige_btn.configure(text=f"Unit Collapse [+{s['prestige_gain']} SP]" if s['can_prestige'] else "Unit Collapse [1.000e6 km]")
        update_button_style(self.prestige_btn, "buyable" if s['can_prestige'] else "default")
        update_button_style(self.dim_collapse_btn, "buyable" if s['can_dimension_collapse'] else
                            ("default" if s['dimension_collapse_unlocked'] else "locked"))

        rows = {
            'velocity': (True, format_distance(s['velocity_price']), s['can_afford_velocity'],
                         f"Level {s['velocity_level']}: {to_precision(s['velocity_multiplier'])}x -> {to_precision(s['next_velocity_multiplier'])}x"),
            'acceleration': (s['accel_unlocked'], format_distance(s['accel_price']), s['can_afford_acceleration'],
                             f"Level {s['accel_level']}: +{to_precision(s['acceleration'])} -> +{to_precision(s['next_acceleration'])} m/s²"),
            'compression': (s['compression_unlocked'], format_distance(s['compression_cost']), s['can_afford_compression'],
                            f"Level {s['compression_level']}: /{to_precision(s['compression_divisor'])} -> /{to_precision(s['next_compression_divisor'])} cost"),
            'mass_velocity': (s['mass_unlocked'], format_mass(s['mass_velocity_cost']), s['can_afford_mass_velocity'],
                              f"Level {s['mass_velocity_level']}"),
            'dimension': (s['dimensions_tab_unlocked'], f"{s['dimension_cost']} DP", s['can_afford_dimension'],
                          f"Level {s['dimension_level']}"),
        }
        for key, (unlocked, cost_text, affordable, effect_text) in rows.items():
            cst, eff, btn = self.rows[key]
            cst.configure(text=f"Cost: {cost_text}" if unlocked else "Locked")
            eff.configure(text=effect_text if unlocked else "???")
            update_button_style(btn, "locked" if not unlocked else ("buyable" if affordable else "default"))

        for flag, (btn, text) in self.scale_btns.items():
            update_button_style(btn, "maxed" if s[flag] else "available")
            btn.configure(text=f"{text} - Unlocked!" if s[flag] else text)
        self.dp_lbl.configure(text=f"Dimension Points: {s['dimension_points']}")
        update_button_style(self.enhanced_btn, "maxed" if s['enhanced_dimensions_unlocked'] else "available")
        self.tick_lbl.configure(text=f"{s['tick_rate']}/s"); self.autosave_lbl.configure(text=f"{s['auto_save_interval']}s")
        self.settings_lbl.configure(text=self.game.settings_message)

    # --- Loops ---
    def loop(self):
        if not self.is_running: return
        self.game.frame()
        try: self.render()
        except tk.TclError: pass
        except Exception as e: logging.error(f"Render error: {e}", exc_info=True)
        self.window.after(FRAME_INTERVAL_MS, self.loop)

    def autosave_loop(self):
        if not self.is_running: return
        self.game.autosave()
        self.window.after(self.game.state.auto_save_interval * 1000, self.autosave_loop)

    def run(self):
        self.loop()
        self.window.after(self.game.state.auto_save_interval * 1000, self.autosave_loop)
        try:
            self.window.mainloop()
        except KeyboardInterrupt:
            logging.info("KeyboardInterrupt. Shutting down...")
            self.on_closing()

    def on_closing(self):
        if not self.is_running: return
        logging.info("Shutdown sequence initiated..."); self.is_running = False
        self.game.save(); logging.info("Final save completed.")
        try: self.window.destroy()
        except tk.TclError as e: logging.error(f"Error destroying main window: {e}")
        logging.info("Shutdown complete.")
