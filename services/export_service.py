import csv
import io
from typing import List


def overview_to_csv(categories: List[dict], students: List[dict]) -> str:
    """
    Render a class overview as CSV.

    - columns: Rank, Student Name, Email, one per category, Final Grade
    - every cell quoted; ungraded categories are left empty
    - final grade with 2 decimals
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(["Rank", "Student Name", "Email", *[c["name"] for c in categories], "Final Grade"])
    for s in students:
        grades = s["category_grades"]
        writer.writerow([
            s["rank"],
            s["student_name"],
            s["email"] or "",
            *["" if grades.get(c["category_id"]) is None else grades[c["category_id"]] for c in categories],
            f"{s['final_grade']:.2f}",
        ])
    return buffer.getvalue()


def export_filename(subject_id: int, promotion_id: int) -> str:
    return f"grades_{subject_id}_{promotion_id}.csv"
