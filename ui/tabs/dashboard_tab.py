import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from services.report_service import ReportService
from utils.constants import CHART_COLORS, INCOME_CATEGORIES, EXPENSE_CATEGORIES
from utils.currency import format_currency, format_signed
from utils.date_helpers import format_display_date, today

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
]


class DashboardTab(ctk.CTkFrame):
    """Period totals, net worth, savings rate and charts."""

    def __init__(
        self,
        master,
        report_service: ReportService,
        date_format: str = "MM/DD/YYYY",
        currency_code: str = "INR",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._report_svc = report_service
        self._date_format = date_format
        self._currency_code = currency_code

        ref = today()
        self._period_var = ctk.StringVar(value="Month")
        self._year_var = ctk.StringVar(value=str(ref.year))
        self._month_var = ctk.StringVar(value=_MONTH_NAMES[ref.month - 1])
        self._type_var = ctk.StringVar(value="All")
        self._cat_var = ctk.StringVar(value="All")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_toolbar()
        self._build_cards()
        self._build_charts()
        self._build_recent()
        self._load()

    def refresh(self):
        self._load()

    def _money(self, value: float) -> str:
        return format_currency(value, self._currency_code)

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkSegmentedButton(
            bar, values=["Month", "Year", "Overall"],
            variable=self._period_var, command=lambda _v: self._on_period_change(),
        ).pack(side="left", padx=(12, 8), pady=8)

        self._year_combo = ctk.CTkComboBox(
            bar, values=[self._year_var.get()], variable=self._year_var,
            width=80, state="readonly", command=lambda _v: self._load(),
        )
        self._year_combo.pack(side="left", padx=4)
        self._month_combo = ctk.CTkComboBox(
            bar, values=_MONTH_NAMES, variable=self._month_var,
            width=120, state="readonly", command=lambda _v: self._load(),
        )
        self._month_combo.pack(side="left", padx=4)

        ctk.CTkLabel(bar, text="Type:").pack(side="left", padx=(16, 4))
        ctk.CTkComboBox(
            bar, values=["All", "Income", "Expense"], variable=self._type_var,
            width=100, state="readonly", command=lambda _v: self._load(),
        ).pack(side="left")

        ctk.CTkLabel(bar, text="Category:").pack(side="left", padx=(16, 4))
        categories = ["All"] + sorted(set(INCOME_CATEGORIES + EXPENSE_CATEGORIES))
        ctk.CTkComboBox(
            bar, values=categories, variable=self._cat_var,
            width=150, state="readonly", command=lambda _v: self._load(),
        ).pack(side="left", padx=(0, 12))

    def _on_period_change(self):
        period = self._period_var.get()
        self._year_combo.configure(state="disabled" if period == "Overall" else "readonly")
        self._month_combo.configure(state="readonly" if period == "Month" else "disabled")
        self._load()

    def _build_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=12)
        self._card_frame.grid_columnconfigure((0, 1, 2, 3, 4), weight=1)
        self._period_label = ctk.CTkLabel(
            self._card_frame, text="", text_color="gray60", anchor="w",
        )
        self._period_label.grid(row=0, column=0, columnspan=5, sticky="w", padx=6)

    def _build_charts(self):
        charts = ctk.CTkFrame(self, fg_color="transparent")
        charts.grid(row=2, column=0, sticky="nsew", padx=16)
        charts.grid_columnconfigure(0, weight=3)
        charts.grid_columnconfigure(1, weight=2)

        bar_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        bar_outer.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        ctk.CTkLabel(
            bar_outer, text="Last 6 Months",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._bar_fig = Figure(figsize=(5, 2.6), dpi=80, tight_layout=True)
        self._bar_ax = self._bar_fig.add_subplot(111)
        self._bar_mpl = FigureCanvasTkAgg(self._bar_fig, master=bar_outer)
        self._bar_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

        pie_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=1, sticky="nsew")
        ctk.CTkLabel(
            pie_outer, text="Expenses by Category",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._pie_fig = Figure(figsize=(3, 2.6), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 4))
        self._legend_frame = ctk.CTkFrame(pie_outer, fg_color="transparent")
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

    def _build_recent(self):
        self._recent_frame = ctk.CTkScrollableFrame(self, label_text="Transactions")
        self._recent_frame.grid(row=3, column=0, sticky="nsew", padx=16, pady=12)
        self._recent_frame.grid_columnconfigure(1, weight=1)

    def _filters(self) -> dict:
        period = self._period_var.get().lower()
        return {
            "period": period,
            "year": int(self._year_var.get()),
            "month": _MONTH_NAMES.index(self._month_var.get()) + 1,
            "type_filter": self._type_var.get().lower(),
            "category": "all" if self._cat_var.get() == "All" else self._cat_var.get(),
        }

    def _load(self):
        years = [str(y) for y in self._report_svc.get_available_years()]
        if self._year_var.get() not in years:
            years.append(self._year_var.get())
        self._year_combo.configure(values=sorted(years, reverse=True))

        filters = self._filters()
        self._period_label.configure(
            text=self._report_svc.period_label(
                filters["period"], filters["year"], filters["month"]
            )
        )
        stats = self._report_svc.get_period_stats(**filters)
        overall = self._report_svc.get_overall_stats(stats)

        for w in self._card_frame.grid_slaves(row=1):
            w.destroy()
        cards = [
            ("Net Worth", format_signed(overall["net_worth"], self._currency_code),
             "#2196F3" if overall["net_worth"] >= 0 else "#FF9800"),
            ("Income", self._money(stats["income"]), "#4CAF50"),
            ("Expenses", self._money(stats["expense"]), "#F44336"),
            ("Net", format_signed(stats["net"], self._currency_code),
             "#2196F3" if stats["net"] >= 0 else "#FF9800"),
            ("Savings Rate", f"{overall['savings_rate']:.1f}%", "#9C27B0"),
        ]
        for i, (label, text, color) in enumerate(cards):
            self._make_card(i, label, text, color)

        self._draw_bar_chart()
        self._draw_pie_chart(self._report_svc.get_category_breakdown(**filters))
        self._fill_transactions(self._report_svc.get_transactions(**filters))

    def _make_card(self, col, label, text, color):
        card = ctk.CTkFrame(self._card_frame, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=1, column=col, padx=6, pady=(4, 0), sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12), text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card, text=text,
            font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    def _draw_bar_chart(self):
        ax = self._bar_ax
        ax.clear()
        self._style_ax(ax, self._bar_fig)

        data = self._report_svc.get_monthly_chart_data(months=6)
        if not data:
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._bar_mpl.draw_idle()
            return

        labels = [d["month"][5:] for d in data]
        x = list(range(len(labels)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], [d.get("income", 0) for d in data], w, color="#4CAF50")
        ax.bar([i + w / 2 for i in x], [d.get("expense", 0) for d in data], w, color="#F44336")
        ax.set_xticks(x)
        ax.set_xticklabels(labels)
        ax.yaxis.set_major_formatter(
            lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
        )
        self._bar_mpl.draw_idle()

    def _draw_pie_chart(self, breakdown):
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)
        for w in self._legend_frame.winfo_children():
            w.destroy()

        total = sum(d["total"] for d in breakdown)
        if not breakdown or total == 0:
            ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(breakdown))]
        ax.pie([d["total"] for d in breakdown], colors=colors, startangle=90)
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

        for i, (d, color) in enumerate(zip(breakdown[:6], colors)):
            ctk.CTkLabel(
                self._legend_frame,
                text=f"■ {d['category']}  {d['total'] / total * 100:.0f}%",
                text_color=color, anchor="w", font=ctk.CTkFont(size=11),
            ).grid(row=i // 2, column=i % 2, sticky="w", padx=4)

    def _fill_transactions(self, transactions):
        for w in self._recent_frame.winfo_children():
            w.destroy()
        if not transactions:
            ctk.CTkLabel(
                self._recent_frame, text="No transactions for this period.",
                text_color="gray60",
            ).grid(row=0, column=0, columnspan=3, pady=20)
            return

        for idx, tx in enumerate(transactions[:50]):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            f = ctk.CTkFrame(self._recent_frame, fg_color=bg, corner_radius=4)
            f.grid(row=idx, column=0, columnspan=3, sticky="ew", pady=1)
            f.grid_columnconfigure(1, weight=1)
            ctk.CTkLabel(
                f, text=format_display_date(tx.date, self._date_format), width=85, anchor="w"
            ).grid(row=0, column=0, padx=6, pady=3)
            ctk.CTkLabel(f, text=f"{tx.category} · {tx.description or ''}", anchor="w").grid(
                row=0, column=1, padx=4, sticky="ew"
            )
            ctk.CTkLabel(
                f, text=format_signed(tx.signed_amount, self._currency_code),
                text_color="#4CAF50" if tx.type == "income" else "#F44336",
                anchor="e", width=110,
            ).grid(row=0, column=2, padx=6)
