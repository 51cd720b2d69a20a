from datetime import date

from fpdf import FPDF


def _latin1(text: str) -> str:
    """Encode to latin-1 with replacement; the built-in fpdf fonts only cover latin-1."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def export_filename(extension: str, today: date | None = None) -> str:
    day = (today or date.today()).isoformat()
    return f"optimized-resume-{day}.{extension}"


def generate_resume_pdf(tailored_resume: str, generated_on: date | None = None) -> bytes:
    """Render a tailored resume as a paginated A4 PDF."""
    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    # Title
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Optimized Resume", new_x="LMARGIN", new_y="NEXT")

    # Date
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(80, 80, 80)
    generated = (generated_on or date.today()).strftime("%d/%m/%Y")
    pdf.cell(0, 7, f"Generated: {generated}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    # Body text
    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(0, 0, 0)
    pdf.multi_cell(0, 6, _latin1(tailored_resume))

    return bytes(pdf.output())
