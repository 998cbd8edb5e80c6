"""Built-in policy template offered on the upload screen."""

from __future__ import annotations

from policy_portal.models import PolicyDocument, PolicySection

DEFAULT_POLICY = PolicyDocument(
    company_name="Global Network",
    document_title="مدونة قواعد السلوك المهني",
    date="2024-01-01",
    sections=(
        PolicySection(
            title="النزاهة والأمانة",
            rules=(
                "الالتزام بالصدق والشفافية في جميع التعاملات الداخلية والخارجية.",
                "عدم قبول الهدايا أو المزايا التي قد تؤثر على الحياد في اتخاذ القرار.",
                "الإفصاح الفوري عن أي تعارض محتمل في المصالح للإدارة المختصة.",
            ),
        ),
        PolicySection(
            title="بيئة العمل والاحترام المتبادل",
            rules=(
                "معاملة جميع الزملاء والعملاء باحترام دون تمييز.",
                "يُحظر التحرش أو التنمر بكافة أشكاله داخل بيئة العمل وخارجها.",
                "الالتزام بمواعيد العمل الرسمية وإبلاغ المدير المباشر عند الغياب.",
            ),
        ),
        PolicySection(
            title="سرية المعلومات",
            rules=(
                "المحافظة على سرية بيانات الشركة والعملاء وعدم مشاركتها مع أي طرف غير مخول.",
                "عدم استخدام المعلومات الداخلية لتحقيق منفعة شخصية.",
                "استمرار الالتزام بالسرية بعد انتهاء العلاقة التعاقدية مع الشركة.",
            ),
        ),
        PolicySection(
            title="استخدام أصول الشركة",
            rules=(
                "استخدام الأجهزة والأنظمة لأغراض العمل فقط.",
                "عدم تثبيت برامج غير مرخصة على أجهزة الشركة.",
                "الإبلاغ الفوري عن أي فقدان أو تلف في أصول الشركة.",
            ),
        ),
        PolicySection(
            title="الامتثال والإبلاغ",
            rules=(
                "الالتزام بالأنظمة واللوائح المعمول بها في الدولة.",
                "الإبلاغ عن أي مخالفة لهذه المدونة عبر القنوات المعتمدة دون خوف من الانتقام.",
            ),
        ),
    ),
)
