"""
Alpha Visa Diagnosis Questions

Questionnaire for the Spanish international-teleworker visa, organized as:
1. Profile and basic eligibility (q_V1 - q_V6)
2. One track per profile (founder, freelancer, employee)
3. Company, qualification and resources (q_V10 - q_V20)

Each question has:
- Stable ID
- Prompt text per locale
- Ordered option labels per locale (answers are the zero-based option index)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from .errors import InvalidAnswerError, InvalidInputError
from .translations import DEFAULT_LOCALE


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question."""
    id: str
    text: Mapping[str, str]
    options: Mapping[str, Tuple[str, ...]]

    @property
    def option_count(self) -> int:
        return len(self.options[DEFAULT_LOCALE])

    def prompt(self, locale: str) -> str:
        return self.text.get(locale) or self.text[DEFAULT_LOCALE]

    def labels(self, locale: str) -> Tuple[str, ...]:
        return self.options.get(locale) or self.options[DEFAULT_LOCALE]

    def has_option(self, index: int) -> bool:
        return 0 <= index < self.option_count


def _question(question_id: str, text: Dict[str, str], options: Dict[str, List[str]]) -> Question:
    return Question(
        id=question_id,
        text=MappingProxyType(dict(text)),
        options=MappingProxyType({loc: tuple(labels) for loc, labels in options.items()}),
    )


# Profile answers to q_V1, each routed to its own track of questions
PROFILES = MappingProxyType({
    0: {"id": "founder", "entry": "q_V7_A"},
    1: {"id": "freelancer", "entry": "q_V7_B"},
    2: {"id": "employee", "entry": "q_V7_C"},
})

PROFILE_QUESTION = "q_V1"


QUESTIONS: Tuple[Question, ...] = (
    # =========================================================================
    # PROFILE & BASIC ELIGIBILITY
    # =========================================================================
    _question(
        "q_V1",
        {
            "pt": "Para realizar o teste, escolha o seu Perfil:",
            "en": "To take the test, choose your Profile:",
            "es": "Para realizar la prueba, elija su Perfil:",
        },
        {
            "pt": ["Fundador/Sócio de empresa", "Consultor/Prestador de Serviços/Freelancer", "Empregado Registrado/Executivo"],
            "en": ["Founder/Business Partner", "Consultant/Service Provider/Freelancer", "Registered Employee/Executive"],
            "es": ["Fundador/Socio de empresa", "Consultor/Prestador de Servicios/Freelancer", "Empleado Registrado/Ejecutivo"],
        },
    ),
    _question(
        "q_V2",
        {
            "pt": "Sua cidadania NÃO é da União Europeia/EEE/Suíça, correto?",
            "en": "Your citizenship is NOT from EU/EEA/Switzerland, correct?",
            "es": "Su ciudadanía NO es de la UE/EEE/Suiza, ¿correcto?",
        },
        {
            "pt": ["CORRETO - Não possuo essas cidadanias", "Possuo cidadania EU/EEE/Suíça"],
            "en": ["CORRECT - I don't have these citizenships", "I have EU/EEA/Swiss citizenship"],
            "es": ["CORRECTO - No poseo esas ciudadanías", "Poseo ciudadanía UE/EEE/Suiza"],
        },
    ),
    _question(
        "q_V3",
        {
            "pt": "Tem 18 anos ou mais?",
            "en": "Are you 18 years old or older?",
            "es": "¿Tiene 18 años o más?",
        },
        {
            "pt": ["SIM - 18 anos ou mais", "NÃO - Menor de 18"],
            "en": ["YES - 18 or older", "NO - Under 18"],
            "es": ["SÍ - 18 años o más", "NO - Menor de 18"],
        },
    ),
    _question(
        "q_V4",
        {
            "pt": "Passaporte válido por mais de 6 meses?",
            "en": "Passport valid for more than 6 months?",
            "es": "¿Pasaporte válido por más de 6 meses?",
        },
        {
            "pt": ["SIM - Válido por 6+ meses", "NÃO - Vencido ou próximo"],
            "en": ["YES - Valid for 6+ months", "NO - Expired or close"],
            "es": ["SÍ - Válido por 6+ meses", "NO - Vencido o próximo"],
        },
    ),
    _question(
        "q_V5",
        {
            "pt": "Onde pretende solicitar o visto?",
            "en": "Where do you intend to apply?",
            "es": "¿Dónde pretende solicitar?",
        },
        {
            "pt": ["Na Espanha (decisão rápida, 3 anos)", "No Consulado (mais lento, 1 ano)"],
            "en": ["In Spain (fast decision, 3 years)", "At Consulate (slower, 1 year)"],
            "es": ["En España (decisión rápida, 3 años)", "En el Consulado (más lento, 1 año)"],
        },
    ),
    _question(
        "q_V6",
        {
            "pt": "Se já está na Espanha, sua situação é regular?",
            "en": "If in Spain, is your status regular?",
            "es": "Si está en España, ¿su situación es regular?",
        },
        {
            "pt": ["SIM - Regular na Espanha", "Irregular na Espanha", "NÃO ESTOU NA ESPANHA"],
            "en": ["YES - Regular in Spain", "Irregular in Spain", "NOT IN SPAIN"],
            "es": ["SÍ - Regular en España", "Irregular en España", "NO ESTOY EN ESPAÑA"],
        },
    ),

    # =========================================================================
    # TRACK A: FOUNDER / BUSINESS PARTNER
    # =========================================================================
    _question(
        "q_V7_A",
        {
            "pt": "Contrato societário permite atuação 100% remota?",
            "en": "Partnership agreement allows 100% remote work?",
            "es": "¿Contrato societario permite actuación 100% remota?",
        },
        {
            "pt": ["SIM - Contrato com cláusula remota", "NÃO - Sem essa cláusula"],
            "en": ["YES - Contract with remote clause", "NO - Without clause"],
            "es": ["SÍ - Contrato con cláusula remota", "NO - Sin esa cláusula"],
        },
    ),
    _question(
        "q_V7A_2",
        {
            "pt": "Contrato registrado há mais de 3 meses?",
            "en": "Contract registered for more than 3 months?",
            "es": "¿Contrato registrado hace más de 3 meses?",
        },
        {
            "pt": ["SIM - Mais de 3 meses", "NÃO - Menos de 3 meses"],
            "en": ["YES - More than 3 months", "NO - Less than 3 months"],
            "es": ["SÍ - Más de 3 meses", "NO - Menos de 3 meses"],
        },
    ),
    _question(
        "q_V8_A",
        {
            "pt": "Pró-labore igual ou superior a €2.800/mês?",
            "en": "Pro-labore equal to or greater than €2,800/month?",
            "es": "¿Pro-labore igual o superior a €2.800/mes?",
        },
        {
            "pt": ["SIM - €2.800 ou mais", "NÃO - Menos de €2.800"],
            "en": ["YES - €2,800 or more", "NO - Less than €2,800"],
            "es": ["SÍ - €2.800 o más", "NO - Menos de €2.800"],
        },
    ),
    _question(
        "q_V9_A",
        {
            "pt": "Extratos bancários (3 meses) comprovam pró-labore?",
            "en": "Bank statements (3 months) prove pro-labore?",
            "es": "¿Extractos bancarios (3 meses) comprueban pro-labore?",
        },
        {
            "pt": ["SIM - Tenho os extratos", "NÃO - Não tenho", "Tenho mas valores são menores"],
            "en": ["YES - I have statements", "NO - I don't have", "I have but amounts are less"],
            "es": ["SÍ - Tengo los extractos", "NO - No tengo", "Tengo pero valores son menores"],
        },
    ),

    # =========================================================================
    # TRACK B: CONSULTANT / FREELANCER
    # =========================================================================
    _question(
        "q_V7_B",
        {
            "pt": "Possui contratos formais com clientes?",
            "en": "Do you have formal contracts with clients?",
            "es": "¿Posee contratos formales con clientes?",
        },
        {
            "pt": ["SIM - Contratos formais", "NÃO - Sem contratos"],
            "en": ["YES - Formal contracts", "NO - No contracts"],
            "es": ["SÍ - Contratos formales", "NO - Sin contratos"],
        },
    ),
    _question(
        "q_V8_B",
        {
            "pt": "Renda mensal média igual ou superior a €2.800?",
            "en": "Average monthly income equal to or greater than €2,800?",
            "es": "¿Renta mensual promedio igual o superior a €2.800?",
        },
        {
            "pt": ["SIM - €2.800 ou mais", "NÃO - Menos de €2.800"],
            "en": ["YES - €2,800 or more", "NO - Less than €2,800"],
            "es": ["SÍ - €2.800 o más", "NO - Menos de €2.800"],
        },
    ),
    _question(
        "q_V9_B",
        {
            "pt": "Comprova renda com extratos/faturas (3 meses)?",
            "en": "Can prove income with statements/invoices (3 months)?",
            "es": "¿Comprueba renta con extractos/facturas (3 meses)?",
        },
        {
            "pt": ["SIM - Tenho comprovantes", "NÃO - Não consigo comprovar"],
            "en": ["YES - I have proof", "NO - Can't prove"],
            "es": ["SÍ - Tengo comprobantes", "NO - No consigo comprobar"],
        },
    ),

    # =========================================================================
    # TRACK C: EMPLOYEE / EXECUTIVE
    # =========================================================================
    _question(
        "q_V7_C",
        {
            "pt": "Possui contrato de trabalho formal?",
            "en": "Do you have formal employment contract?",
            "es": "¿Posee contrato de trabajo formal?",
        },
        {
            "pt": ["SIM - Contrato formal", "NÃO - Informal"],
            "en": ["YES - Formal contract", "NO - Informal"],
            "es": ["SÍ - Contrato formal", "NO - Informal"],
        },
    ),
    _question(
        "q_V8_C",
        {
            "pt": "Salário igual ou superior a €2.800/mês?",
            "en": "Salary equal to or greater than €2,800/month?",
            "es": "¿Salario igual o superior a €2.800/mes?",
        },
        {
            "pt": ["SIM - €2.800 ou mais", "NÃO - Menos de €2.800"],
            "en": ["YES - €2,800 or more", "NO - Less than €2,800"],
            "es": ["SÍ - €2.800 o más", "NO - Menos de €2.800"],
        },
    ),
    _question(
        "q_V9_C",
        {
            "pt": "Possui holerites dos últimos 3 meses?",
            "en": "Do you have pay stubs from last 3 months?",
            "es": "¿Posee recibos de sueldo de los últimos 3 meses?",
        },
        {
            "pt": ["SIM - Tenho holerites", "NÃO - Não tenho"],
            "en": ["YES - I have pay stubs", "NO - I don't have"],
            "es": ["SÍ - Tengo recibos", "NO - No tengo"],
        },
    ),

    # =========================================================================
    # COMPANY, QUALIFICATION & RESOURCES
    # =========================================================================
    _question(
        "q_V10",
        {
            "pt": "Como comprovará cobertura de Segurança Social?",
            "en": "How will you prove Social Security coverage?",
            "es": "¿Cómo comprobará cobertura de Seguridad Social?",
        },
        {
            "pt": ["Filiarei à SS espanhola após aprovação", "Certificado do meu país"],
            "en": ["Join Spanish SS after approval", "Certificate from my country"],
            "es": ["Me afiliaré a la SS española tras aprobación", "Certificado de mi país"],
        },
    ),
    _question(
        "q_V11",
        {
            "pt": "Empresa está sediada FORA da Espanha?",
            "en": "Is company based OUTSIDE Spain?",
            "es": "¿Empresa está ubicada FUERA de España?",
        },
        {
            "pt": ["SIM - Fora da Espanha", "NÃO - Na Espanha"],
            "en": ["YES - Outside Spain", "NO - In Spain"],
            "es": ["SÍ - Fuera de España", "NO - En España"],
        },
    ),
    _question(
        "q_V12",
        {
            "pt": "Empresa ativa há pelo menos 1 ano?",
            "en": "Company active for at least 1 year?",
            "es": "¿Empresa activa hace al menos 1 año?",
        },
        {
            "pt": ["SIM - Mais de 1 ano", "NÃO - Menos de 1 ano"],
            "en": ["YES - More than 1 year", "NO - Less than 1 year"],
            "es": ["SÍ - Más de 1 año", "NO - Menos de 1 año"],
        },
    ),
    _question(
        "q_V13",
        {
            "pt": "Empresa pode fornecer carta de autorização?",
            "en": "Can company provide authorization letter?",
            "es": "¿Empresa puede proporcionar carta de autorización?",
        },
        {
            "pt": ["SIM - Pode fornecer", "NÃO - Não pode ou quer"],
            "en": ["YES - Can provide", "NO - Can't or won't"],
            "es": ["SÍ - Puede proporcionar", "NO - No puede o quiere"],
        },
    ),
    _question(
        "q_V14",
        {
            "pt": "Possui diploma superior ou 3+ anos experiência?",
            "en": "Do you have degree or 3+ years experience?",
            "es": "¿Posee diploma superior o 3+ años experiencia?",
        },
        {
            "pt": ["SIM - Tenho", "NÃO - Não tenho"],
            "en": ["YES - I have", "NO - I don't have"],
            "es": ["SÍ - Tengo", "NO - No tengo"],
        },
    ),
    _question(
        "q_V15",
        {
            "pt": "CV indica 3+ meses de trabalho remoto?",
            "en": "Does CV show 3+ months remote work?",
            "es": "¿CV indica 3+ meses de trabajo remoto?",
        },
        {
            "pt": ["SIM - Demonstra 3+ meses", "NÃO - Menos ou não consta"],
            "en": ["YES - Shows 3+ months", "NO - Less or not listed"],
            "es": ["SÍ - Demuestra 3+ meses", "NO - Menos o no consta"],
        },
    ),
    _question(
        "q_V16",
        {
            "pt": "Comprova €33.600 em recursos financeiros?",
            "en": "Can prove €33,600 in financial resources?",
            "es": "¿Comprueba €33.600 en recursos financieros?",
        },
        {
            "pt": ["SIM - Possuo €33.600+", "NÃO - Menos de €33.600"],
            "en": ["YES - I have €33,600+", "NO - Less than €33,600"],
            "es": ["SÍ - Poseo €33.600+", "NO - Menos de €33.600"],
        },
    ),
    _question(
        "q_V17",
        {
            "pt": "Pretende levar familiares?",
            "en": "Do you plan to bring family?",
            "es": "¿Pretende llevar familiares?",
        },
        {
            "pt": ["NÃO - Sozinho(a)", "SIM - Com família"],
            "en": ["NO - Alone", "YES - With family"],
            "es": ["NO - Solo(a)", "SÍ - Con familia"],
        },
    ),
    _question(
        "q_V18",
        {
            "pt": "Recursos adicionais para família? (1º: €12.600, demais: €4.200)",
            "en": "Additional resources for family? (1st: €12,600, others: €4,200)",
            "es": "¿Recursos adicionales para familia? (1º: €12.600, demás: €4.200)",
        },
        {
            "pt": ["SIM - Possuo recursos", "NÃO - Não possuo"],
            "en": ["YES - I have resources", "NO - I don't have"],
            "es": ["SÍ - Poseo recursos", "NO - No poseo"],
        },
    ),
    _question(
        "q_V19",
        {
            "pt": "Seguro saúde sem carência e cobertura integral na Espanha?",
            "en": "Health insurance without waiting period and full coverage in Spain?",
            "es": "¿Seguro de salud sin carencia y cobertura integral en España?",
        },
        {
            "pt": ["SIM - Tenho seguro adequado", "NÃO - Não tenho ou inadequado"],
            "en": ["YES - I have adequate insurance", "NO - I don't have or inadequate"],
            "es": ["SÍ - Tengo seguro adecuado", "NO - No tengo o inadecuado"],
        },
    ),
    _question(
        "q_V20",
        {
            "pt": "Certificado de antecedentes penais (5 anos) sem apontamentos?",
            "en": "Criminal record certificate (5 years) with no issues?",
            "es": "¿Certificado de antecedentes penales (5 años) sin anotaciones?",
        },
        {
            "pt": ["SIM - Certificado limpo", "NÃO - Não tenho", "Tenho mas com apontamentos"],
            "en": ["YES - Clean certificate", "NO - I don't have", "I have but with issues"],
            "es": ["SÍ - Certificado limpio", "NO - No tengo", "Tengo pero con anotaciones"],
        },
    ),
)

QUESTIONS_BY_ID: Mapping[str, Question] = MappingProxyType({q.id: q for q in QUESTIONS})


def check_answers(answers: Mapping[str, int], questions: Mapping[str, Question] = QUESTIONS_BY_ID) -> None:
    """
    Validate an answer set against the question catalog.

    Raises:
        InvalidInputError: answers is not a mapping
        InvalidAnswerError: unknown question id, non-integer value or
            option index out of range
    """
    if not isinstance(answers, Mapping):
        raise InvalidInputError(f"Answers must be a mapping, got {type(answers).__name__}")

    for question_id, value in answers.items():
        question = questions.get(question_id)
        if question is None:
            raise InvalidAnswerError(question_id, value, "unknown question")
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidAnswerError(question_id, value, "answer must be an option index")
        if not question.has_option(value):
            raise InvalidAnswerError(
                question_id, value, f"option index must be between 0 and {question.option_count - 1}"
            )
