"""Server-rendered HTML for each workflow state.

The embedded script reads the chosen file, reports scroll geometry and posts
the form. The workflow behind the JSON API decides gates and transitions.
"""

from __future__ import annotations

import json
from datetime import datetime
from html import escape
from typing import TYPE_CHECKING

from policy_portal.presentation.views import build_certificate, build_review_view
from policy_portal.workflow.states import WorkflowSnapshot, WorkflowState

if TYPE_CHECKING:
    from policy_portal.core.config import PresentationConfig
    from policy_portal.presentation.views import CertificateView, ReviewView

_SCRIPT = """
const api = (path, body) => fetch(`/api/sessions/${SESSION}${path}`, {
  method: "POST",
  headers: {"Content-Type": "application/json"},
  body: JSON.stringify(body || {}),
}).then((r) => r.json());

const upload = document.getElementById("policy-file");
if (upload) {
  upload.addEventListener("change", () => {
    const file = upload.files[0];
    if (!file) return;
    document.getElementById("upload-view").hidden = true;
    document.getElementById("processing-view").hidden = false;
    const reader = new FileReader();
    reader.onloadend = () => api("/upload", {image: reader.result, mime_type: file.type})
      .finally(() => location.reload());
    reader.readAsDataURL(file);
  });
}

const pane = document.getElementById("policy-content");
if (pane) {
  const form = document.getElementById("sign-form");
  const name = document.getElementById("employee-name");
  const agreed = document.getElementById("agree");
  const submit = document.getElementById("sign-submit");
  let gateOpen = form.dataset.gateOpen === "true";
  const refresh = () => {
    form.classList.toggle("locked", !gateOpen);
    form.querySelector("fieldset").disabled = !gateOpen;
    document.getElementById("scroll-hint").hidden = gateOpen;
    submit.disabled = !(gateOpen && name.value && agreed.checked);
  };
  const geometry = () => ({viewport_height: pane.clientHeight, content_height: pane.scrollHeight});
  const report = (path, body) => api(path, body).then((s) => { gateOpen = s.has_read_to_bottom; refresh(); });
  report("/measure", geometry());
  pane.addEventListener("scroll", () => {
    if (!gateOpen) report("/scroll", {scroll_offset: pane.scrollTop, ...geometry()});
  });
  name.addEventListener("input", refresh);
  agreed.addEventListener("change", refresh);
  form.addEventListener("submit", (e) => {
    e.preventDefault();
    api("/sign", {
      employee_name: name.value,
      employee_id: document.getElementById("employee-id").value,
      agreed: agreed.checked,
    }).then(() => location.reload());
  });
  refresh();
}

document.querySelectorAll("[data-action]").forEach((el) => {
  el.addEventListener("click", () => api(`/${el.dataset.action}`).then(() => location.reload()));
});
const printButton = document.getElementById("print");
if (printButton) printButton.addEventListener("click", () => window.print());
"""

_STYLE = """
body { font-family: sans-serif; margin: 0; background: #f1f5f9; }
nav, footer { background: #fff; padding: 1rem 1.5rem; }
main { max-width: 56rem; margin: 2rem auto; }
.error { background: #fef2f2; color: #b91c1c; padding: 1rem; text-align: center; }
#policy-content { max-height: 60vh; overflow-y: auto; background: #fff; padding: 2rem; }
.locked { opacity: 0.5; pointer-events: none; }
@media print { nav, footer, .actions { display: none; } }
"""


def _layout(title: str, body: str, session_id: str, config: PresentationConfig) -> str:
    year = datetime.now().year
    return (
        '<!DOCTYPE html>\n<html lang="ar" dir="rtl">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{escape(title)} | {escape(config.portal_name)}</title>\n"
        f"<style>{_STYLE}</style>\n</head>\n<body>\n"
        f"<nav><strong>{escape(config.portal_name)}</strong> · نظام التوقيع الرقمي للموظفين</nav>\n"
        f"<main>\n{body}\n</main>\n"
        f"<footer>&copy; {year} جميع الحقوق محفوظة لشركة {escape(config.company_name)}</footer>\n"
        f"<script>const SESSION = {json.dumps(session_id)};{_SCRIPT}</script>\n"
        "</body>\n</html>\n"
    )


def render_upload(error: str | None) -> str:
    banner = f'<div class="error" role="alert">{escape(error)}</div>\n' if error else ""
    return (
        '<section id="upload-view">\n'
        "<h1>أهلاً بك</h1>\n"
        "<p>يرجى تحميل صورة من سياسة العمل لتحويلها إلى وثيقة رقمية، أو استخدام النموذج الجاهز.</p>\n"
        f"{banner}"
        '<label>رفع صورة السياسة <input id="policy-file" type="file" accept="image/*"></label>\n'
        '<button type="button" data-action="default-template">استخدام "قواعد السلوك"</button>\n'
        "</section>\n"
        + render_processing(hidden=True)
    )


def render_processing(hidden: bool = False) -> str:
    attr = " hidden" if hidden else ""
    return (
        f'<section id="processing-view"{attr}>\n'
        "<h2>جاري المعالجة الذكية</h2>\n"
        "<p>يقوم الذكاء الاصطناعي بقراءة النص وتحليله...</p>\n"
        "</section>\n"
    )


def render_review(view: ReviewView, has_read_to_bottom: bool) -> str:
    sections = []
    for section in view.sections:
        rules = "".join(f"<li>{escape(rule)}</li>" for rule in section.rules)
        sections.append(
            f'<section class="policy-section">\n'
            f'<h3><span class="number">{section.number}</span> {escape(section.title)}</h3>\n'
            f"<ul>{rules}</ul>\n</section>\n"
        )
    gate = "true" if has_read_to_bottom else "false"
    return (
        f"<header><h1>{escape(view.company_name)}</h1><p>{escape(view.document_title)}</p></header>\n"
        '<div id="policy-content">\n'
        f"<h2>{escape(view.document_title)}</h2>\n"
        f"<p>تاريخ الإصدار: {escape(view.date)}</p>\n"
        + "".join(sections)
        + "<p class=\"notice\">يُرجى قراءة كافة البنود أعلاه بعناية. يُعد توقيعك أدناه إقراراً "
        "بالاطلاع على هذه القواعد والالتزام بها، وأن مخالفتها قد تعرضك للمساءلة وفقاً للوائح الشركة.</p>\n"
        "</div>\n"
        f'<p id="scroll-hint"{" hidden" if has_read_to_bottom else ""}>يرجى التمرير للأسفل لقراءة كامل المستند</p>\n'
        f'<form id="sign-form" data-gate-open="{gate}">\n<fieldset>\n'
        '<label>الاسم الكامل <input id="employee-name" type="text" required placeholder="أدخل اسمك الثلاثي"></label>\n'
        '<label>الرقم الوظيفي (اختياري) <input id="employee-id" type="text" placeholder="أدخل رقمك الوظيفي"></label>\n'
        '<label><input id="agree" type="checkbox" required> '
        "أقر بأنني قرأت وفهمت مدونة السلوك المهني وأتعهد بالالتزام بها.</label>\n"
        '<button id="sign-submit" type="submit" disabled>توقيع واعتماد</button>\n'
        "</fieldset>\n</form>\n"
        '<button type="button" data-action="cancel">إلغاء</button>\n'
    )


def render_certificate(view: CertificateView) -> str:
    return (
        '<section id="certificate">\n'
        "<h2>تم الاعتماد بنجاح</h2>\n"
        "<p>شكراً لك، تم تسجيل موافقتك على السياسة بنجاح.</p>\n"
        "<dl>\n"
        f"<dt>اسم الموظف</dt><dd>{escape(view.employee_name)}</dd>\n"
        f"<dt>الرقم الوظيفي</dt><dd>{escape(view.employee_id)}</dd>\n"
        f"<dt>السياسة</dt><dd>{escape(view.document_title)}</dd>\n"
        f'<dt>تاريخ التوقيع</dt><dd dir="ltr">{escape(view.signed_on)}</dd>\n'
        "</dl>\n"
        '<div class="actions">\n'
        '<button id="print" type="button">تحميل الإيصال</button>\n'
        '<button type="button" data-action="reset">بدء عملية جديدة</button>\n'
        "</div>\n</section>\n"
    )


def render_page(snapshot: WorkflowSnapshot, session_id: str, config: PresentationConfig) -> str:
    """Full HTML document for whatever state *snapshot* is in."""
    if snapshot.state is WorkflowState.REVIEW and snapshot.policy is not None:
        body = render_review(build_review_view(snapshot.policy), snapshot.has_read_to_bottom)
        title = snapshot.policy.document_title
    elif snapshot.state is WorkflowState.SIGNED and snapshot.policy and snapshot.signature:
        view = build_certificate(
            snapshot.policy,
            snapshot.signature,
            date_format=config.date_format,
            tz_name=config.timezone,
        )
        body = render_certificate(view)
        title = view.document_title
    elif snapshot.state is WorkflowState.PROCESSING:
        body = render_processing()
        title = "جاري المعالجة"
    else:
        body = render_upload(snapshot.error)
        title = "رفع السياسة"
    return _layout(title, body, session_id, config)
