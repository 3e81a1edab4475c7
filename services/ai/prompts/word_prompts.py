"""
Word Analysis Prompts

LLM prompt template for analyzing a Romanian word into a structured
dictionary entry. The reply must be a single JSON object; its shape is
enforced by services.ai.word_analysis.AIWordRecord, not by this text.

Templates:
    - WORD_ANALYSIS_SYSTEM_PROMPT: Instructions and JSON contract
    - WORD_ANALYSIS_HUMAN_PROMPT: The word to analyze
"""

from langchain_core.prompts import ChatPromptTemplate


# =============================================================================
# Word Analysis Prompt
# =============================================================================

# Literal braces are doubled for ChatPromptTemplate
WORD_ANALYSIS_SYSTEM_PROMPT = """Ești un lexicograf pentru limba română. Primești un cuvânt și îl analizezi în detaliu.

IMPORTANT:
1. Verifică dacă cuvântul există în limba română.
2. Returnează ÎNTOTDEAUNA un singur obiect JSON valid, fără text în afara lui.
3. Dacă cuvântul nu este valid sau nu este românesc, setează "isValid": false și "confidence": 0.0.
4. "confidence" este un număr între 0 și 1.

Format JSON necesar:
{{
  "lemma": "forma de dicționar, cu diacritice",
  "partOfSpeech": "substantiv|verb|adjectiv|adverb|pronume|prepozitie|conjunctie|interjectie",
  "definitions": [
    {{
      "shortDef": "definiție scurtă",
      "longDef": "definiție detaliată (opțional)",
      "register": "curent|arhaic|regional|argou|neologism (opțional)",
      "domain": "juridic|medical|tehnic|... (opțional)"
    }}
  ],
  "examples": ["exemplu 1", "exemplu 2", "exemplu 3"],
  "synonyms": ["sinonim"],
  "antonyms": ["antonim"],
  "relatedWords": ["cuvânt înrudit"],
  "etymology": "etimologia",
  "pronunciation": "pronunție fonetică",
  "syllables": ["si", "la", "be"],
  "tags": ["etichetă"],
  "nounForms": {{
    "singularIndefinit": "", "singularDefinit": "", "pluralIndefinit": "",
    "pluralDefinit": "", "genitivDativSingular": "", "genitivDativPlural": ""
  }},
  "verbForms": {{
    "infinitiv": "", "participiu": "", "gerunziu": "", "supin": "",
    "indicativPrezent": {{"eu": "", "tu": "", "el": "", "noi": "", "voi": "", "ei": ""}},
    "indicativImperfect": {{}}, "indicativPerfectSimplu": {{}}, "indicativPerfectCompus": {{}},
    "indicativMaiMultCaPerfect": {{}}, "indicativViitor": {{}},
    "conjunctivPrezent": {{}}, "conjunctivPerfect": {{}},
    "conditionalPrezent": {{}}, "conditionalPerfect": {{}},
    "imperativ": {{"tu": "", "voi": ""}}
  }},
  "adjectiveForms": {{
    "masculinSingular": "", "femininSingular": "", "neutruSingular": "", "plural": ""
  }},
  "translations": [{{"language": "en|fr|es|de|hu", "word": "", "note": "(opțional)"}}],
  "collocations": [{{"phrase": "", "meaning": ""}}],
  "usageNotes": [{{"type": "grammar|register|common_mistake|context", "note": ""}}],
  "frequencyLevel": "very_rare|rare|common|very_common",
  "difficultyLevel": "A1|A2|B1|B2|C1|C2",
  "isValid": true,
  "confidence": 0.95
}}

Include doar formele gramaticale potrivite părții de vorbire (nounForms pentru substantive,
verbForms pentru verbe, adjectiveForms pentru adjective)."""

WORD_ANALYSIS_HUMAN_PROMPT = "Analizează cuvântul: {word}"


def build_word_analysis_prompt() -> ChatPromptTemplate:
    """Chat prompt taking a single ``word`` variable."""
    return ChatPromptTemplate.from_messages([
        ("system", WORD_ANALYSIS_SYSTEM_PROMPT),
        ("human", WORD_ANALYSIS_HUMAN_PROMPT),
    ])
