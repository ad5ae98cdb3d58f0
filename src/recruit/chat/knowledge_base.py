"""Keyword-matched answers and quick-reply suggestions for the recruiting chat."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KnowledgeEntry:
    topic: str
    keywords: tuple[str, ...]
    response: str


# Order matters: the first entry with a matching keyword wins.
KNOWLEDGE_BASE: tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        "salary",
        ("salary", "pay", "money", "compensation", "earn", "income"),
        "The San Francisco Sheriff's Department offers a competitive salary range of $116,428 to "
        "$184,362 for Deputy Sheriffs, depending on experience and qualifications. This is "
        "complemented by excellent benefits including healthcare, retirement plans, and various "
        "allowances. Deputies also have opportunities for overtime and special assignment pay.",
    ),
    KnowledgeEntry(
        "requirements",
        ("requirements", "qualify", "eligible", "qualifications"),
        "To become a San Francisco Deputy Sheriff, you must be at least 21 years old, have a high "
        "school diploma or GED, be a U.S. citizen or permanent resident who has applied for "
        "citizenship, have a valid driver's license, and have no felony convictions. You must also "
        "pass a background check, medical examination, psychological evaluation, and physical "
        "abilities test.",
    ),
    KnowledgeEntry(
        "process",
        ("application", "process", "apply", "steps", "how to apply"),
        "The application process for becoming a San Francisco Deputy Sheriff includes several "
        "steps: 1) Complete an online application, 2) Pass a written exam, 3) Complete a physical "
        "abilities test, 4) Pass an oral interview, 5) Successfully complete a background "
        "investigation, 6) Pass medical and psychological evaluations, and 7) Complete the "
        "Sheriff's Academy. The entire process typically takes 4-6 months.",
    ),
    KnowledgeEntry(
        "academy",
        ("academy", "training", "learn"),
        "The San Francisco Sheriff's Department Academy is approximately 23 weeks long. During this "
        "time, recruits receive comprehensive training in law enforcement techniques, legal "
        "procedures, defensive tactics, firearms, emergency response, and more. The academy is "
        "challenging but rewarding, designed to prepare you for the important responsibilities of "
        "a Deputy Sheriff.",
    ),
    KnowledgeEntry(
        "benefits",
        ("benefits", "healthcare", "insurance", "retirement", "pension"),
        "San Francisco Deputy Sheriffs receive excellent benefits including comprehensive medical, "
        "dental, and vision coverage for themselves and their dependents. The retirement plan "
        "allows deputies to retire after 25 years of service with up to 75% of their highest "
        "salary. Additional benefits include paid vacation, sick leave, tuition reimbursement, and "
        "access to housing assistance programs.",
    ),
    KnowledgeEntry(
        "schedule",
        ("schedule", "hours", "shifts", "work schedule", "days off"),
        "The San Francisco Sheriff's Department offers several shift options: traditional 8-hour "
        "shifts, 5 days a week with weekends off for many administrative positions; 12-hour shifts "
        "with 3 days on and 4 days off; and 12-hour shifts with 4 days on and 3 days off. New "
        "deputies typically start with one of the 12-hour shift patterns, with more schedule "
        "options becoming available with seniority.",
    ),
    KnowledgeEntry(
        "career",
        ("career", "advancement", "promotion", "growth", "future"),
        "The San Francisco Sheriff's Department offers numerous advancement opportunities. "
        "Deputies can promote to Senior Deputy, Sergeant, Lieutenant, Captain, and beyond. There "
        "are also specialized units such as K-9, Emergency Response Team, Hostage Negotiation "
        "Team, and various administrative and investigative positions. Promotions are based on "
        "experience, performance, testing, and interviews.",
    ),
    KnowledgeEntry(
        "veterans",
        ("veteran", "military", "gi bill", "service"),
        "The San Francisco Sheriff's Department values military experience. Veterans may receive "
        "hiring preference points, and those with GI Bill benefits can use them during academy "
        "training. Your military training and discipline are highly valued in law enforcement, "
        "and several programs help veterans transition to a career in the Sheriff's Department.",
    ),
    KnowledgeEntry(
        "housing",
        ("housing", "live", "residence", "commute", "relocation"),
        "While deputies are not required to live within San Francisco city limits, there are "
        "benefits to living locally. The department offers access to discounted housing programs "
        "and first-time homebuyer assistance specifically for law enforcement officers in San "
        "Francisco.",
    ),
    KnowledgeEntry(
        "physical",
        ("physical", "fitness", "test", "requirements", "exercise"),
        "The physical abilities test includes events such as a 1.5-mile run, push-ups, sit-ups, "
        "and an obstacle course designed to simulate job-related tasks. Specific requirements "
        "vary by age and gender. Start a fitness routine well before applying; the department "
        "sometimes offers pre-academy physical training programs to help candidates prepare.",
    ),
    KnowledgeEntry(
        "background",
        ("background", "check", "investigation", "history", "disqualify"),
        "The background investigation is thorough and includes checking your employment history, "
        "education, financial records, criminal history, driving record, and personal references. "
        "Honesty throughout the application process is crucial. Common disqualifiers include "
        "felony convictions, recent drug use, significant financial problems, and dishonesty "
        "during the application process.",
    ),
    KnowledgeEntry(
        "age",
        ("age", "too old", "maximum age", "minimum age"),
        "The minimum age to become a Deputy Sheriff is 21. There is no maximum age limit, and "
        "successful candidates have joined the department in their 40s and 50s. As long as you can "
        "meet the physical requirements and complete the academy training, you are encouraged to "
        "apply regardless of your age.",
    ),
    KnowledgeEntry(
        "education",
        ("education", "college", "degree", "school"),
        "While a high school diploma or GED is the minimum educational requirement, many deputies "
        "have associate's or bachelor's degrees. Higher education can be beneficial for career "
        "advancement. The department offers tuition reimbursement for continuing education.",
    ),
    KnowledgeEntry(
        "appearance",
        ("tattoos", "appearance", "grooming", "dress code"),
        "The San Francisco Sheriff's Department has a professional appearance policy. Visible "
        "tattoos on the face, neck, and hands are generally not permitted while in uniform. "
        "Tattoos elsewhere that are not visible in uniform are acceptable. Grooming standards "
        "require a neat, clean appearance.",
    ),
    KnowledgeEntry(
        "diversity",
        ("women", "female", "gender", "diversity"),
        "The San Francisco Sheriff's Department actively encourages women to apply and has a strong "
        "commitment to diversity. Approximately 20% of deputies are women, higher than the "
        "national average for law enforcement, with women serving at all ranks and mentorship "
        "programs specifically for female deputies.",
    ),
    KnowledgeEntry(
        "drugs",
        ("drug", "marijuana", "cannabis", "test", "use"),
        "The department conducts drug testing as part of the medical examination. Recent use of "
        "illegal drugs, including marijuana (which remains federally illegal), can disqualify "
        "candidates. Prior use is evaluated individually during the background investigation.",
    ),
    KnowledgeEntry(
        "duties",
        ("duties", "responsibilities", "job", "role", "day to day"),
        "Deputy Sheriffs have diverse responsibilities including courthouse security, operating "
        "jail facilities, serving legal papers, executing evictions, providing security at City "
        "Hall and General Hospital, and transporting prisoners. All roles focus on maintaining "
        "safety, security, and order while treating everyone with dignity and respect.",
    ),
    KnowledgeEntry(
        "police-vs-sheriff",
        ("difference", "police", "sheriff", "versus", "vs"),
        "The main difference between the Sheriff's Department and the Police Department is "
        "jurisdiction. SFPD handles general law enforcement and crime response throughout the "
        "city. The Sheriff's Department manages the jail system, provides court security, serves "
        "civil papers, conducts evictions, and provides security for city buildings.",
    ),
    KnowledgeEntry(
        "equipment",
        ("equipment", "gear", "uniform", "provided", "buy"),
        "The department provides your initial uniform and equipment, including duty weapon, body "
        "armor, radio, and other essential gear. An annual uniform allowance helps with "
        "replacement and maintenance of your gear.",
    ),
    KnowledgeEntry(
        "safety",
        ("dangerous", "safety", "risk", "injury", "danger"),
        "Like all law enforcement careers, being a Deputy Sheriff involves some inherent risks. "
        "The department prioritizes deputy safety through extensive training, proper equipment, "
        "and sound policies and procedures, with assignment-specific training to minimize risk.",
    ),
    KnowledgeEntry(
        "family",
        ("family", "children", "work life", "balance", "time off"),
        "The department recognizes the importance of work-life balance. The various shift options "
        "help many deputies maintain family time, and benefits include paid vacation, sick leave, "
        "family medical leave, and parental leave.",
    ),
)

DEFAULT_RESPONSE = (
    "I'm here to help answer your questions about becoming a San Francisco Deputy Sheriff. You "
    "can ask me about the application process, requirements, training, benefits, salary, career "
    "opportunities, or any other aspects of the job you're curious about."
)

# (keyword, suggestions); first keyword found in the lowercased input wins.
QUICK_REPLIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("salary", ("What benefits do deputies get?", "Is there overtime pay?", "How do promotions work?")),
    ("requirement", ("How do I apply?", "What is the physical test like?", "Is there an age limit?")),
    ("academy", ("How long is the academy?", "Am I paid during training?", "What is the physical test like?")),
    ("benefit", ("What is the salary range?", "How does retirement work?", "Is there housing assistance?")),
    ("process", ("What are the requirements?", "How long does hiring take?", "What is the background check?")),
    ("apply", ("What are the requirements?", "How long does hiring take?", "What is the background check?")),
    ("background", ("What disqualifies a candidate?", "How do I apply?")),
    ("schedule", ("What shifts are available?", "How much time off do deputies get?")),
    ("career", ("What specialized units exist?", "How do promotions work?")),
    ("veteran", ("Do veterans get hiring preference?", "Can I use my GI Bill?")),
)
DEFAULT_QUICK_REPLIES = ("What is the salary range?", "What are the requirements?", "How do I apply?")


def match_entry(text: str) -> KnowledgeEntry | None:
    """First knowledge entry with any keyword contained in `text`, case-insensitively."""
    lowered = text.lower()
    for entry in KNOWLEDGE_BASE:
        if any(keyword in lowered for keyword in entry.keywords):
            return entry
    return None


def generate_response(text: str) -> tuple[str, str]:
    """Return (topic, response) for a free-text question. Unmatched input gets the default answer."""
    entry = match_entry(text)
    if entry is None:
        return "general", DEFAULT_RESPONSE
    return entry.topic, entry.response


def quick_replies(text: str) -> list[str]:
    lowered = text.lower()
    for keyword, suggestions in QUICK_REPLIES:
        if keyword in lowered:
            return list(suggestions)
    return list(DEFAULT_QUICK_REPLIES)
