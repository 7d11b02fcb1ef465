import io
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from study.domain.Plan import Plan
from study.domain.Progress import PlanProgress


def generate_pdf_for_plan(plan: Plan, progress: PlanProgress):
    """Generate a PDF: title, progress line, monthly goals and a Week / Goal / Task / Date / Done table."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Study Plan – {escape(plan.exam_name)}, {escape(plan.month)}", styles["Title"]),
        Paragraph(
            f"Progress: {progress.completed_tasks}/{progress.total_tasks} tasks ({progress.percentage}%), "
            f"weeks {progress.weekly_completed}/{progress.weekly_total}, "
            f"monthly goals {progress.monthly_completed}/{progress.monthly_total}",
            styles["Normal"],
        ),
        Spacer(1, 12),
    ]

    if plan.monthly_goals:
        elements.append(Paragraph("Monthly goals", styles["Heading2"]))
        for goal in plan.monthly_goals:
            mark = "[x]" if goal.completed else "[ ]"
            elements.append(Paragraph(f"{mark} {escape(goal.goal)}", styles["Normal"]))
        elements.append(Spacer(1, 12))

    data = [["Week", "Goal", "Task", "Date", "Done"]]
    for week in plan.weekly_goals:
        week_label = f"Week {week.week_number}" + (" (done)" if week.completed else "")
        if not week.tasks:
            data.append([week_label, week.goal, "-", "", ""])
        for task in week.tasks:
            data.append([week_label, week.goal, task.name, task.date, "yes" if task.completed else "no"])
    for task in plan.unassigned_tasks():
        data.append(["-", "-", task.name, task.date, "yes" if task.completed else "no"])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#3F51B5")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (-1,-1), "CENTER"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
