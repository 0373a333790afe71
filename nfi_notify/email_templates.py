"""
MJML Email Templates
Body templates for NFI REPORT transactional emails, keyed by body template id
"""

import io
import logging
from typing import Callable, Mapping, Optional

from mjml import mjml_to_html

from .config import SITE_URL
from .domain.email.errors import TemplateRenderError, UnknownTemplate
from .domain.email.schemas import Recipient
from .utils.sanitization import sanitize_params, sanitize_string

logger = logging.getLogger(__name__)

# NFI REPORT colors - Navy/Green color scheme
THEME = {
    "primary": "#00A651",
    "header_bg": "#0D1B35",
    "background": "#f3f4f6",
    "card_bg": "#ffffff",
    "text_primary": "#111827",
    "text_secondary": "#374151",
    "text_muted": "#9ca3af",
    "border": "#e5e7eb",
    "warning": "#f59e0b",
}

BRAND_NAME = "NFI REPORT"
BRAND_TAGLINE = "Niger Financial Insights"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    footer_note: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="0 40px 32px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="9999px"
              padding="16px 0"
              inner-padding="12px 28px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_section = ""
    if footer_note:
        footer_section = f"""
            <mj-text align="center" font-size="12px" color="{THEME['text_muted']}" padding="12px 0 0 0">
              {footer_note}
            </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['header_bg']}" padding="24px 20px">
          <mj-column>
            <mj-text font-size="24px" font-weight="700" color="{THEME['primary']}" padding="0">
              {BRAND_NAME}
            </mj-text>
            <mj-text font-size="12px" color="{THEME['text_muted']}" padding="4px 0 0 0">
              {BRAND_TAGLINE}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 16px 40px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              <a href="{SITE_URL}/legal" style="color: #6b7280; text-decoration: none;">Mentions légales</a>
            </mj-text>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="12px 0 0 0">
              © {BRAND_NAME}. Tous droits réservés.
            </mj-text>
            {footer_section}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _greeting(name: Optional[str]) -> str:
    return f"Bonjour {name}," if name else "Bonjour,"


def welcome_email_template(user_name: Optional[str] = None) -> str:
    """Welcome email after newsletter signup or account creation"""
    content = f"""
    <mj-text>
      {_greeting(user_name)}
    </mj-text>

    <mj-text>
      Bienvenue dans la communauté {BRAND_NAME} ! Vous recevrez chaque matin nos analyses
      économiques et financières sur l'Afrique et le Niger directement dans votre boîte mail.
    </mj-text>
    """

    return get_base_template(
        title=f"Bienvenue dans la communauté {BRAND_NAME} !",
        preview_text="Vos analyses économiques et financières chaque matin",
        content_sections=content,
        cta_url=SITE_URL,
        cta_label="Lire les dernières analyses →",
        footer_note='Pour vous désabonner, répondez à cet email avec "STOP".',
    )


def subscription_confirmed_template(
    user_name: Optional[str] = None,
    plan: Optional[str] = None,
    expires_at: Optional[str] = None,
) -> str:
    """Standard / Premium subscription confirmation"""
    plan_line = f"Votre formule <strong>{plan}</strong> est désormais active." if plan else (
        "Votre abonnement est désormais actif."
    )
    expiry_line = ""
    if expires_at:
        expiry_line = f"""
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      Valable jusqu'au {expires_at}.
    </mj-text>
        """

    content = f"""
    <mj-text>
      {_greeting(user_name)}
    </mj-text>

    <mj-text>
      {plan_line} Vous avez maintenant accès à l'ensemble des analyses premium de {BRAND_NAME}.
    </mj-text>
    {expiry_line}
    """

    return get_base_template(
        title="Votre abonnement est activé",
        preview_text=f"Merci pour votre confiance, bienvenue dans {BRAND_NAME}",
        content_sections=content,
        cta_url=f"{SITE_URL}/profile",
        cta_label="Voir mon compte",
    )


def newsletter_template(
    user_name: Optional[str] = None,
    headline: Optional[str] = None,
    summary: Optional[str] = None,
    edition_url: Optional[str] = None,
) -> str:
    """Daily financial letter"""
    content = f"""
    <mj-text>
      {_greeting(user_name)}
    </mj-text>

    <mj-text font-size="18px" font-weight="600" color="{THEME['text_primary']}">
      {headline or "L'essentiel de l'actualité économique du jour"}
    </mj-text>
    """
    if summary:
        content += f"""
    <mj-text>
      {summary}
    </mj-text>
        """

    return get_base_template(
        title=f"La lettre financière {BRAND_NAME}",
        preview_text=headline or "Les analyses du jour",
        content_sections=content,
        cta_url=edition_url or SITE_URL,
        cta_label="Lire la lettre complète",
        footer_note='Pour vous désabonner, répondez à cet email avec "STOP".',
    )


def password_reset_template(reset_link: Optional[str] = None) -> str:
    """Password reset"""
    content = f"""
    <mj-text>
      Nous avons reçu une demande de réinitialisation de votre mot de passe.
    </mj-text>

    <mj-text>
      Cliquez sur le bouton ci-dessous pour choisir un nouveau mot de passe. Ce lien expire dans 1 heure.
    </mj-text>

    <mj-text font-size="13px" color="{THEME['text_muted']}">
      Si vous n'êtes pas à l'origine de cette demande, ignorez cet email. Votre mot de passe ne sera pas modifié.
    </mj-text>
    """

    return get_base_template(
        title="Réinitialisation de votre mot de passe",
        preview_text=f"Réinitialisez votre mot de passe {BRAND_NAME}",
        content_sections=content,
        cta_url=reset_link or f"{SITE_URL}/reset-password",
        cta_label="Réinitialiser le mot de passe",
    )


def invoice_template(
    user_name: Optional[str] = None,
    period: Optional[str] = None,
    amount: Optional[str] = None,
    invoice_number: Optional[str] = None,
    invoice_url: Optional[str] = None,
) -> str:
    """Monthly invoice"""
    details = []
    if invoice_number:
        details.append(f"Facture : {invoice_number}")
    if period:
        details.append(f"Période : {period}")

    content = f"""
    <mj-text>
      {_greeting(user_name)}
    </mj-text>

    <mj-text>
      Votre facture {BRAND_NAME} est disponible.
    </mj-text>
    """
    if amount:
        content += f"""
    <mj-text align="center" font-size="32px" font-weight="700" color="{THEME['text_primary']}" padding="20px 0">
      {amount}
    </mj-text>
        """
    if details:
        content += f"""
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      {"<br/>".join(details)}
    </mj-text>
        """

    return get_base_template(
        title="Votre facture",
        preview_text=f"Facture {BRAND_NAME} {period or ''}".strip(),
        content_sections=content,
        cta_url=invoice_url or f"{SITE_URL}/profile",
        cta_label="Consulter la facture",
    )


def premium_alert_template(
    user_name: Optional[str] = None,
    article_title: Optional[str] = None,
    article_excerpt: Optional[str] = None,
    article_url: Optional[str] = None,
) -> str:
    """New premium article alert"""
    content = f"""
    <mj-text>
      {_greeting(user_name)}
    </mj-text>

    <mj-text>
      Une nouvelle analyse premium vient d'être publiée :
    </mj-text>

    <mj-text font-size="18px" font-weight="600" color="{THEME['text_primary']}">
      {article_title or "Nouvelle analyse"}
    </mj-text>
    """
    if article_excerpt:
        content += f"""
    <mj-text color="{THEME['text_secondary']}">
      {article_excerpt}
    </mj-text>
        """

    return get_base_template(
        title="Nouvelle analyse premium",
        preview_text=article_title or "Nouvelle analyse premium",
        content_sections=content,
        cta_url=article_url or SITE_URL,
        cta_label="Lire l'analyse",
    )


# body template id -> (template function, accepted parameter names)
BODY_TEMPLATES: Mapping[str, tuple[Callable[..., str], tuple[str, ...]]] = {
    "welcome": (welcome_email_template, ("user_name",)),
    "subscription_confirmed": (subscription_confirmed_template, ("user_name", "plan", "expires_at")),
    "newsletter": (newsletter_template, ("user_name", "headline", "summary", "edition_url")),
    "password_reset": (password_reset_template, ("reset_link",)),
    "invoice": (invoice_template, ("user_name", "period", "amount", "invoice_number", "invoice_url")),
    "premium_alert": (
        premium_alert_template,
        ("user_name", "article_title", "article_excerpt", "article_url"),
    ),
}


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(io.StringIO(mjml_content))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise TemplateRenderError(f"Failed to compile MJML template: {str(e)}") from e

    errors = getattr(result, "errors", None)
    html = getattr(result, "html", None)
    if html is None and isinstance(result, Mapping):
        errors = result.get("errors")
        html = result.get("html")
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    if not html:
        raise TemplateRenderError("MJML compilation produced an empty document")
    return html


def render_mjml(template_id: str, recipient: Recipient, params: Mapping[str, str]) -> str:
    """Build the MJML source for a body template, without compiling it"""
    try:
        template_func, accepted = BODY_TEMPLATES[template_id]
    except KeyError:
        raise UnknownTemplate(template_id) from None

    values = sanitize_params(params)
    if "user_name" in accepted and not values.get("user_name") and recipient.display_name:
        values["user_name"] = sanitize_string(recipient.display_name)

    return template_func(**{name: values[name] for name in accepted if values.get(name)})


def render_body(template_id: str, recipient: Recipient, params: Mapping[str, str]) -> str:
    """Render a body template to HTML for the given recipient and parameters"""
    return compile_mjml_to_html(render_mjml(template_id, recipient, params))
