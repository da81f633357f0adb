from flask import Flask, render_template, request, redirect, url_for, make_response
from markupsafe import escape
from datetime import date
import logging
import io

from config.settings import configure_logging, get_settings
from errors import RoundingResidue
from ledger import Ledger
from utils import describe_balance, format_currency, parse_amount, parse_names

# PDF generation - using xhtml2pdf for HTML to PDF conversion
from xhtml2pdf import pisa

configure_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)

# In-memory only: the active group is lost on restart
ACTIVE_GROUP = {"name": None, "ledger": None}


# ------------------ HELPERS ------------------

def new_group(group_name, names):
    """Replace the active group with a fresh ledger holding the given people."""
    ledger = Ledger(get_settings().residue_policy)
    for name in names:
        ledger.register_participant(name)
    ACTIVE_GROUP["name"] = group_name.strip() or "Shared Expenses"
    ACTIVE_GROUP["ledger"] = ledger
    return ledger


def build_summary(ledger):
    """
    Collect everything the page and the PDF report show.

    Returns:
        Dict with expenses, balances (name, amount, text), settlements
        (from, to, amount) and residue_error (str or None)
    """
    symbol = get_settings().currency_symbol
    balances = [
        {
            "name": name,
            "amount": format_currency(amount, symbol),
            "text": describe_balance(name, amount, symbol)
        }
        for name, amount in ledger.balances().items()
    ]

    settlements = []
    residue_error = None
    try:
        for t in ledger.plan_settlements():
            settlements.append({
                "from": t.debtor,
                "to": t.creditor,
                "amount": format_currency(t.amount, symbol)
            })
    except RoundingResidue as e:
        residue_error = str(e)

    return {
        "expenses": ledger.list_expenses(),
        "balances": balances,
        "settlements": settlements,
        "residue_error": residue_error
    }


def render_index(error=None, status=200):
    ledger = ACTIVE_GROUP["ledger"]
    summary = build_summary(ledger) if ledger else None
    html = render_template(
        "index.html",
        group_name=ACTIVE_GROUP["name"],
        participants=ledger.list_participants() if ledger else [],
        summary=summary,
        error=error
    )
    return html, status


def build_report_html(group_name, summary):
    """Build the HTML handed to xhtml2pdf for the PDF report."""
    expense_rows = ''.join(
        f"<tr><td>{escape(e.expense_id)}</td><td>{escape(e.description)}</td>"
        f"<td>{escape(format_currency(e.amount, get_settings().currency_symbol))}</td>"
        f"<td>{escape(e.payer)}</td><td>{escape(', '.join(e.split_among))}</td></tr>"
        for e in summary["expenses"]
    ) or '<tr><td colspan="5">No expenses recorded.</td></tr>'

    balance_rows = ''.join(
        f"<li>{escape(b['text'])}</li>" for b in summary["balances"]
    ) or '<li>No participants yet.</li>'

    if summary["residue_error"]:
        settlement_block = f'<p class="warning">{escape(summary["residue_error"])}</p>'
    else:
        settlement_block = '<br>'.join(
            f"<strong>{escape(s['from'])}</strong> pays <strong>{escape(s['to'])}</strong> {escape(s['amount'])}"
            for s in summary["settlements"]
        ) or '<p>Everyone is settled up!</p>'

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; padding: 20px; color: #333; }}
            h1 {{ color: #667eea; border-bottom: 2px solid #667eea; padding-bottom: 10px; }}
            h2 {{ color: #444; margin-top: 25px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 15px 0; }}
            th, td {{ border: 1px solid #ddd; padding: 10px; text-align: left; }}
            th {{ background: #667eea; color: white; }}
            .warning {{ background: #ffebee; padding: 10px; color: #c62828; }}
            .footer {{ margin-top: 30px; text-align: center; color: #888; font-size: 12px; }}
        </style>
    </head>
    <body>
        <h1>{escape(group_name)}</h1>
        <p><strong>Generated:</strong> {date.today().strftime('%B %d, %Y')}</p>

        <h2>All Expenses</h2>
        <table>
            <tr><th>#</th><th>Description</th><th>Amount</th><th>Paid By</th><th>Split Among</th></tr>
            {expense_rows}
        </table>

        <h2>Current Balances</h2>
        <ul>{balance_rows}</ul>

        <h2>Settlement Plan</h2>
        {settlement_block}

        <div class="footer">
            <p>Generated by Smart Expense Splitter</p>
        </div>
    </body>
    </html>
    """


# ------------------ ROUTES ------------------

@app.route("/")
def index():
    return render_index()


@app.route("/create-group", methods=["POST"])
def create_group():
    names = parse_names(request.form.get("participants", ""))
    try:
        new_group(request.form.get("group_name", ""), names)
    except ValueError as e:
        return render_index(error=str(e), status=400)
    return redirect(url_for("index"))


@app.route("/add-participant", methods=["POST"])
def add_person():
    ledger = ACTIVE_GROUP["ledger"]
    if ledger is None:
        return render_index(error="Create a group first.", status=400)
    try:
        ledger.register_participant(request.form.get("name", ""))
    except ValueError as e:
        return render_index(error=str(e), status=400)
    return redirect(url_for("index"))


@app.route("/add-expense", methods=["POST"])
def add_exp():
    ledger = ACTIVE_GROUP["ledger"]
    if ledger is None:
        return render_index(error="Create a group first.", status=400)

    # Checkboxes post one value per name; a free-text field posts "A, B, C"
    split_names = request.form.getlist("split_among")
    if not split_names:
        split_names = parse_names(request.form.get("split_text", ""))

    try:
        ledger.post_expense(
            description=request.form.get("description", ""),
            amount=parse_amount(request.form.get("amount", "")),
            payer_name=request.form.get("payer", "").strip(),
            split_names=[name.strip() for name in split_names]
        )
    except ValueError as e:
        return render_index(error=str(e), status=400)
    return redirect(url_for("index"))


@app.route("/settle-up", methods=["POST"])
def settle_up():
    ledger = ACTIVE_GROUP["ledger"]
    if ledger is None:
        return render_index(error="Create a group first.", status=400)
    try:
        ledger.settle_up()
    except RoundingResidue as e:
        return render_index(error=str(e), status=409)
    return redirect(url_for("index"))


# ------------------ PDF EXPORT ------------------

@app.route("/export-pdf")
def export_pdf():
    ledger = ACTIVE_GROUP["ledger"]
    group_name = ACTIVE_GROUP["name"] or "Expense Report"

    if ledger is None:
        return "No active group", 400

    html_content = build_report_html(group_name, build_summary(ledger))

    # Convert HTML to PDF
    pdf_buffer = io.BytesIO()
    result = pisa.CreatePDF(io.StringIO(html_content), dest=pdf_buffer)
    if result.err:
        logger.error("PDF export failed for %s", group_name)
        return "Could not generate PDF", 500
    pdf_buffer.seek(0)

    response = make_response(pdf_buffer.read())
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={group_name.replace(" ", "_")}_report.pdf'

    return response


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
