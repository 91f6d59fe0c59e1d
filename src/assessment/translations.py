"""
Localized content for the Alpha Visa Diagnosis

Static label tables keyed by locale, then by internal key:
- Disqualification and completion messages (flow engine)
- Profile, gap, strength and status labels (scoring engine)

Adding a locale means adding it to SUPPORTED_LOCALES and extending the
tables below; flow and scoring logic never change.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "pt"
SUPPORTED_LOCALES: Tuple[str, ...] = ("pt", "en", "es")

LabelTable = Mapping[str, Mapping[str, str]]


def _freeze(table) -> LabelTable:
    return MappingProxyType({loc: MappingProxyType(dict(labels)) for loc, labels in table.items()})


def resolve_locale(locale: Optional[str], default: str = DEFAULT_LOCALE) -> str:
    """
    Map a requested locale to a supported one.

    Accepts region-qualified tags ("pt-BR", "es_ES"); anything unsupported
    falls back to default.
    """
    if locale:
        primary = str(locale).strip().lower().replace("_", "-").split("-")[0]
        if primary in SUPPORTED_LOCALES:
            return primary
        logger.debug(f"Unsupported locale {locale!r}, using {default!r}")
    return default


DISQUALIFICATION_MESSAGES = _freeze({
    "pt": {
        "KO_EU_CITIZEN": "❌ Este visto é exclusivo para cidadãos FORA da União Europeia, EEE e Suíça. Cidadãos dessas regiões já possuem livre circulação.",
        "KO_MINOR": "❌ Menores de 18 anos não podem ser titulares. Podem ser incluídos como dependentes de um adulto solicitante.",
        "KO_IRREGULAR_STAY": "❌ Quem está em situação irregular na Espanha não pode solicitar este visto. É necessário regularizar a situação antes de iniciar o processo.",
        "KO_SPAIN_COMPANY": "❌ Este visto é para TELETRABALHADORES INTERNACIONAIS. Se a empresa está na Espanha, você precisa de visto de trabalho tradicional.",
        "KO_NEW_COMPANY": "❌ A empresa precisa estar ativa há pelo menos 1 ano. Este requisito garante estabilidade do vínculo empregatício.",
    },
    "en": {
        "KO_EU_CITIZEN": "❌ This visa is exclusively for citizens OUTSIDE the EU, EEA and Switzerland. Citizens of these regions already have free movement.",
        "KO_MINOR": "❌ Minors under 18 cannot be visa holders. They can be included as dependents of an adult applicant.",
        "KO_IRREGULAR_STAY": "❌ Applicants in an irregular situation in Spain cannot apply for this visa. Your status must be regularized before starting the process.",
        "KO_SPAIN_COMPANY": "❌ This visa is for INTERNATIONAL TELEWORKERS. If the company is in Spain, you need a traditional work visa.",
        "KO_NEW_COMPANY": "❌ The company must be active for at least 1 year. This requirement ensures employment stability.",
    },
    "es": {
        "KO_EU_CITIZEN": "❌ Esta visa es exclusiva para ciudadanos FUERA de la UE, EEE y Suiza. Ciudadanos de estas regiones ya poseen libre circulación.",
        "KO_MINOR": "❌ Menores de 18 años no pueden ser titulares. Pueden ser incluidos como dependientes de un adulto solicitante.",
        "KO_IRREGULAR_STAY": "❌ Quien se encuentra en situación irregular en España no puede solicitar esta visa. Es necesario regularizar la situación antes de iniciar el proceso.",
        "KO_SPAIN_COMPANY": "❌ Esta visa es para TELETRABAJADORES INTERNACIONALES. Si la empresa está en España, necesita visa de trabajo tradicional.",
        "KO_NEW_COMPANY": "❌ La empresa necesita estar activa hace al menos 1 año. Este requisito garantiza estabilidad del vínculo laboral.",
    },
})

COMPLETION_MESSAGES = _freeze({
    "pt": {"completed": "✅ Diagnóstico concluído!"},
    "en": {"completed": "✅ Diagnosis completed!"},
    "es": {"completed": "✅ ¡Diagnóstico concluido!"},
})

PROFILE_LABELS = _freeze({
    "pt": {"founder": "Fundador/Sócio", "freelancer": "Consultor/Freelancer", "employee": "Empregado/Executivo", "unknown": "Não identificado"},
    "en": {"founder": "Founder/Partner", "freelancer": "Consultant/Freelancer", "employee": "Employee/Executive", "unknown": "Not identified"},
    "es": {"founder": "Fundador/Socio", "freelancer": "Consultor/Freelancer", "employee": "Empleado/Ejecutivo", "unknown": "No identificado"},
})

GAP_LABELS = _freeze({
    "pt": {
        "eu_citizen": "Cidadania europeia (requisito eliminatório)",
        "minor": "Menor de idade (requisito eliminatório)",
        "irregular_spain": "Situação irregular na Espanha (requisito eliminatório)",
        "spain_company": "Empresa sediada na Espanha (requisito eliminatório)",
        "new_company": "Empresa com menos de 1 ano (requisito eliminatório)",
        "criminal_record_issues": "Antecedentes criminais com anotações (requisito eliminatório)",
        "passport_validity": "Passaporte com validade curta (< 12 meses)",
        "no_remote_clause_partner": "Contrato social sem cláusula remota",
        "contract_under_3_months": "Contrato registrado há menos de 3 meses",
        "insufficient_prolabore": "Pró-labore insuficiente (< €2.800/mês)",
        "no_bank_statements_prolabore": "Falta extratos para comprovar pró-labore",
        "insufficient_bank_statements": "Extratos com valores insuficientes",
        "no_formal_contracts": "Falta de contratos de serviço formais",
        "insufficient_income": "Renda média insuficiente (< €2.800/mês)",
        "no_income_proof": "Falta de comprovação de renda (faturas/extratos)",
        "no_remote_clause_employee": "Contrato de trabalho sem cláusula remota",
        "insufficient_salary": "Salário insuficiente (< €2.800/mês)",
        "no_payslips": "Falta de holerites para comprovação",
        "no_authorization_letter": "Empresa não fornece carta de autorização",
        "no_qualification_proof": "Falta comprovação de qualificação (diploma ou 3+ anos exp.)",
        "no_remote_experience": "CV não reflete experiência remota de 3+ meses",
        "insufficient_financial_resources": "Recursos financeiros insuficientes (< €33.600)",
        "insufficient_family_resources": "Recursos financeiros insuficientes para família",
        "inadequate_health_insurance": "Seguro de saúde inadequado",
        "pending_criminal_certificate": "Certificado de antecedentes criminais pendente",
    },
    "en": {
        "eu_citizen": "European citizenship (knock-out requirement)",
        "minor": "Under 18 years old (knock-out requirement)",
        "irregular_spain": "Irregular status in Spain (knock-out requirement)",
        "spain_company": "Company based in Spain (knock-out requirement)",
        "new_company": "Company less than 1 year old (knock-out requirement)",
        "criminal_record_issues": "Criminal record with issues (knock-out requirement)",
        "passport_validity": "Passport with short validity (< 12 months)",
        "no_remote_clause_partner": "Partnership agreement without remote clause",
        "contract_under_3_months": "Contract registered less than 3 months ago",
        "insufficient_prolabore": "Insufficient pro-labore (< €2,800/month)",
        "no_bank_statements_prolabore": "Missing bank statements to prove pro-labore",
        "insufficient_bank_statements": "Bank statements with insufficient amounts",
        "no_formal_contracts": "Missing formal service contracts",
        "insufficient_income": "Insufficient average income (< €2,800/month)",
        "no_income_proof": "Missing income proof (invoices/statements)",
        "no_remote_clause_employee": "Employment contract without remote clause",
        "insufficient_salary": "Insufficient salary (< €2,800/month)",
        "no_payslips": "Missing pay stubs for verification",
        "no_authorization_letter": "Company does not provide authorization letter",
        "no_qualification_proof": "Missing qualification proof (degree or 3+ years exp.)",
        "no_remote_experience": "CV does not reflect 3+ months remote experience",
        "insufficient_financial_resources": "Insufficient financial resources (< €33,600)",
        "insufficient_family_resources": "Insufficient financial resources for family",
        "inadequate_health_insurance": "Inadequate health insurance",
        "pending_criminal_certificate": "Pending criminal record certificate",
    },
    "es": {
        "eu_citizen": "Ciudadanía europea (requisito eliminatorio)",
        "minor": "Menor de edad (requisito eliminatorio)",
        "irregular_spain": "Situación irregular en España (requisito eliminatorio)",
        "spain_company": "Empresa ubicada en España (requisito eliminatorio)",
        "new_company": "Empresa con menos de 1 año (requisito eliminatorio)",
        "criminal_record_issues": "Antecedentes penales con anotaciones (requisito eliminatorio)",
        "passport_validity": "Pasaporte con validez corta (< 12 meses)",
        "no_remote_clause_partner": "Contrato social sin cláusula remota",
        "contract_under_3_months": "Contrato registrado hace menos de 3 meses",
        "insufficient_prolabore": "Pro-labore insuficiente (< €2.800/mes)",
        "no_bank_statements_prolabore": "Faltan extractos para comprobar pro-labore",
        "insufficient_bank_statements": "Extractos con valores insuficientes",
        "no_formal_contracts": "Falta de contratos de servicio formales",
        "insufficient_income": "Renta promedio insuficiente (< €2.800/mes)",
        "no_income_proof": "Falta de comprobación de renta (facturas/extractos)",
        "no_remote_clause_employee": "Contrato de trabajo sin cláusula remota",
        "insufficient_salary": "Salario insuficiente (< €2.800/mes)",
        "no_payslips": "Falta de recibos de sueldo para comprobación",
        "no_authorization_letter": "Empresa no proporciona carta de autorización",
        "no_qualification_proof": "Falta comprobación de calificación (diploma o 3+ años exp.)",
        "no_remote_experience": "CV no refleja experiencia remota de 3+ meses",
        "insufficient_financial_resources": "Recursos financieros insuficientes (< €33.600)",
        "insufficient_family_resources": "Recursos financieros insuficientes para familia",
        "inadequate_health_insurance": "Seguro de salud inadecuado",
        "pending_criminal_certificate": "Certificado de antecedentes penales pendiente",
    },
})

STRENGTH_LABELS = _freeze({
    "pt": {
        "eligible_citizenship": "Cidadania elegível",
        "adult": "Maioridade confirmada",
        "valid_passport": "Passaporte com validade adequada",
        "compatible_income_partner": "Renda compatível com requisitos",
        "compatible_income_freelancer": "Renda compatível com requisitos",
        "compatible_income_employee": "Renda compatível com requisitos",
        "company_outside_spain": "Empresa sediada fora da Espanha",
        "mature_company": "Empresa ativa há mais de 1 ano",
        "qualification_proven": "Qualificação profissional comprovada",
        "adequate_resources": "Recursos financeiros adequados",
        "clean_record": "Antecedentes criminais limpos",
    },
    "en": {
        "eligible_citizenship": "Eligible citizenship",
        "adult": "Legal age confirmed",
        "valid_passport": "Passport with adequate validity",
        "compatible_income_partner": "Income compatible with requirements",
        "compatible_income_freelancer": "Income compatible with requirements",
        "compatible_income_employee": "Income compatible with requirements",
        "company_outside_spain": "Company based outside Spain",
        "mature_company": "Company active for more than 1 year",
        "qualification_proven": "Professional qualification proven",
        "adequate_resources": "Adequate financial resources",
        "clean_record": "Clean criminal record",
    },
    "es": {
        "eligible_citizenship": "Ciudadanía elegible",
        "adult": "Mayoría de edad confirmada",
        "valid_passport": "Pasaporte con validez adecuada",
        "compatible_income_partner": "Renta compatible con requisitos",
        "compatible_income_freelancer": "Renta compatible con requisitos",
        "compatible_income_employee": "Renta compatible con requisitos",
        "company_outside_spain": "Empresa ubicada fuera de España",
        "mature_company": "Empresa activa hace más de 1 año",
        "qualification_proven": "Calificación profesional comprobada",
        "adequate_resources": "Recursos financieros adecuados",
        "clean_record": "Antecedentes penales limpios",
    },
})

STATUS_LABELS = _freeze({
    "pt": {
        "not_eligible": "NÃO ELEGÍVEL",
        "needs_preparation": "PREPARAÇÃO NECESSÁRIA",
        "good_potential": "BOM POTENCIAL",
        "strong_profile": "PERFIL FORTE",
        "excellent_profile": "PERFIL EXCELENTE",
    },
    "en": {
        "not_eligible": "NOT ELIGIBLE",
        "needs_preparation": "NEEDS PREPARATION",
        "good_potential": "GOOD POTENTIAL",
        "strong_profile": "STRONG PROFILE",
        "excellent_profile": "EXCELLENT PROFILE",
    },
    "es": {
        "not_eligible": "NO ELEGIBLE",
        "needs_preparation": "PREPARACIÓN NECESARIA",
        "good_potential": "BUEN POTENCIAL",
        "strong_profile": "PERFIL FUERTE",
        "excellent_profile": "PERFIL EXCELENTE",
    },
})


@dataclass(frozen=True)
class ContentCatalog:
    """
    Read-only bundle of every label table, loaded once and shared by the
    flow and scoring engines.
    """
    disqualification_messages: LabelTable = field(default_factory=lambda: DISQUALIFICATION_MESSAGES)
    completion_messages: LabelTable = field(default_factory=lambda: COMPLETION_MESSAGES)
    profile_labels: LabelTable = field(default_factory=lambda: PROFILE_LABELS)
    gap_labels: LabelTable = field(default_factory=lambda: GAP_LABELS)
    strength_labels: LabelTable = field(default_factory=lambda: STRENGTH_LABELS)
    status_labels: LabelTable = field(default_factory=lambda: STATUS_LABELS)
    default_locale: str = DEFAULT_LOCALE

    def lookup(self, table: LabelTable, key: str, locale: str) -> str:
        """Translate key, falling back to the default locale, never to the raw key."""
        labels = table.get(locale) or {}
        if key in labels:
            return labels[key]
        fallback = table.get(self.default_locale) or {}
        if key in fallback:
            return fallback[key]
        raise ConfigurationError(f"No label for {key!r} in {locale!r} or {self.default_locale!r}")

    def disqualification_message(self, reason_code: str, locale: str) -> str:
        return self.lookup(self.disqualification_messages, reason_code, locale)

    def completion_message(self, locale: str) -> str:
        return self.lookup(self.completion_messages, "completed", locale)

    def profile(self, key: str, locale: str) -> str:
        return self.lookup(self.profile_labels, key, locale)

    def gap(self, key: str, locale: str) -> str:
        return self.lookup(self.gap_labels, key, locale)

    def strength(self, key: str, locale: str) -> str:
        return self.lookup(self.strength_labels, key, locale)

    def status(self, key: str, locale: str) -> str:
        return self.lookup(self.status_labels, key, locale)


DEFAULT_CATALOG = ContentCatalog()
