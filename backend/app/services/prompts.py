from typing import Dict, List, Optional

QUESTION_SYSTEM_MESSAGE = "You are an expert technical interviewer. Always respond with valid JSON only."
EVALUATOR_SYSTEM_MESSAGE = "You are an expert interviewer evaluating candidates. Always respond with valid JSON only."
SUMMARY_SYSTEM_MESSAGE = "You are a career coach providing interview feedback. Always respond with valid JSON only."
FLASHCARD_SYSTEM_MESSAGE = (
    "You are an expert technical interviewer creating flash cards for interview preparation. "
    "Generate clear, concise flash cards that test understanding of key concepts. "
    "Return ONLY valid JSON with no markdown formatting or code blocks."
)
PROJECT_SYSTEM_MESSAGE = (
    "You are a senior software architect. Generate comprehensive project specifications. "
    "Return ONLY valid JSON with no markdown formatting or code blocks."
)


def difficulty_split(count: int) -> Dict[str, int]:
    """Roughly 20% easy, 50% medium and 30% hard questions"""
    easy = max(1, round(count * 0.2))
    hard = max(1, round(count * 0.3))
    return {"easy": easy, "medium": max(0, count - easy - hard), "hard": hard}


def question_generator_prompt(
    role: str,
    experience: str,
    interview_type: str,
    question_count: int,
    tech_stack: Optional[List[str]] = None,
    mode: str = "interview",
    topics: Optional[List[str]] = None,
) -> str:
    split = difficulty_split(question_count)
    expected_time = {"easy": 60, "medium": 90, "hard": 120}

    examples = []
    question_id = 1
    for difficulty in ("easy", "medium", "hard"):
        for _ in range(split[difficulty]):
            examples.append(
                f'    {{"id": {question_id}, "text": "question text here", '
                f'"difficulty": "{difficulty}", "topic": "topic name", '
                f'"expectedTime": {expected_time[difficulty]}}}'
            )
            question_id += 1

    if mode == "practice":
        header = "You are a senior technical mentor conducting a focused practice session."
    else:
        header = (
            "You are a senior technical interviewer at a top tech company "
            f"conducting a {interview_type} interview."
        )

    context_lines = [
        f"- Role: {role}",
        f"- Experience Level: {experience} years",
        f"- Interview Type: {interview_type}",
    ]
    if tech_stack:
        context_lines.append(f"- Tech Stack: {', '.join(tech_stack)}")
    if topics:
        context_lines.append(f"- Focus Topics: {', '.join(topics)}")

    rules = [
        f"Generate exactly {question_count} questions: {split['easy']} easy, "
        f"{split['medium']} medium and {split['hard']} hard.",
        "Questions must be answerable verbally in 1-2 minutes.",
        "Match the depth of each question to the candidate's experience level.",
        "Do not repeat questions or ask several questions in one.",
    ]
    if tech_stack:
        rules.append(
            f"Focus on real-world usage, trade-offs and common pitfalls of: {', '.join(tech_stack)}."
        )
    if topics:
        rules.append(f"Dive into these topics with practical scenarios: {', '.join(topics)}.")

    numbered_rules = "\n".join(f"{n}. {rule}" for n, rule in enumerate(rules, start=1))
    example_json = ",\n".join(examples)

    return f"""{header}

Candidate Context:
{chr(10).join(context_lines)}

Rules:
{numbered_rules}

Return ONLY valid JSON in this exact format:
{{
  "questions": [
{example_json}
  ]
}}"""


def answer_evaluator_prompt(question: str, answer: str, role: str, experience: str) -> str:
    return f"""You are an expert interviewer evaluating a candidate's verbal response in a mock interview.

Interview Context:
- Role: {role}
- Experience Level: {experience} years

Question Asked:
"{question}"

Candidate's Answer (transcribed from voice):
"{answer}"

Evaluate the answer on three dimensions (0-10 scale):

1. Technical Accuracy (0-10):
   - Is the answer factually correct?
   - Are the concepts explained properly?
   - Consider the experience level when scoring

2. Communication (0-10):
   - Was the answer clear and well-structured?
   - Did they explain concepts in an understandable way?

3. Depth (0-10):
   - Did they show understanding beyond surface level?
   - Did they provide examples or consider edge cases?

Be fair but constructive. A fresher won't know as much as a senior developer.

Return ONLY valid JSON in this exact format:
{{
  "technicalScore": 7,
  "communicationScore": 8,
  "depthScore": 6,
  "strengths": ["strength 1", "strength 2"],
  "weaknesses": ["weakness 1", "weakness 2"],
  "idealAnswer": "A comprehensive answer would include... (2-3 sentences)",
  "followUpTip": "For your next interview, try to also mention... (1 sentence)",
  "encouragement": "Brief positive note about what they did well (1 sentence)"
}}"""


def summary_generator_prompt(answers: List[Dict], role: str) -> str:
    answers_text = "\n\n".join(
        f'Question {n}: "{a["question"]}"\n'
        f'Answer: "{a["answer"]}"\n'
        f'Scores - Technical: {a["technicalScore"]}/10, '
        f'Communication: {a["communicationScore"]}/10, Depth: {a["depthScore"]}/10'
        for n, a in enumerate(answers, start=1)
    )
    return f"""You are a career coach analyzing a candidate's mock interview performance.

Role Applied For: {role}

Interview Performance:
{answers_text}

Generate a comprehensive interview summary that helps the candidate improve.

Return ONLY valid JSON in this exact format:
{{
  "performanceSummary": "2-3 sentence overview of how they did",
  "strengths": ["top strength 1", "top strength 2", "top strength 3"],
  "weaknesses": ["area to improve 1", "area to improve 2", "area to improve 3"],
  "recommendedTopics": ["topic to study 1", "topic to study 2", "topic to study 3"],
  "actionPlan": "Specific 2-3 sentence advice on what to focus on next",
  "encouragement": "Motivational closing message (1-2 sentences)",
  "readinessLevel": "Not Ready | Almost Ready | Ready | Well Prepared"
}}"""


def flashcard_prompt(technology: str, topic: str, count: int) -> str:
    return f"""Generate {count} interview-focused flash cards for {technology} - {topic}.

Guidelines:
1. Front: clear, specific technical question (1-2 sentences)
2. Back: concise but complete answer (2-4 sentences)
3. Include code snippets where helpful
4. Mix conceptual and practical questions
5. Cover common interview questions for this topic

Return ONLY valid JSON in this exact format:
{{
  "cards": [
    {{
      "id": "1",
      "front": "What is the difference between == and === in JavaScript?",
      "back": "== compares after type coercion, === compares value and type without coercion.",
      "difficulty": "easy",
      "tags": ["{technology}", "{topic}"],
      "hint": "Think about type coercion",
      "codeSnippet": "1 == '1'  // true\\n1 === '1' // false"
    }}
  ]
}}

Generate exactly {count} cards with varied difficulty (easy, medium, hard).
Make questions specific to {technology} {topic} and relevant for technical interviews."""


def project_prompt(technology: str, domain: str, count: int = 5) -> str:
    return f"""Generate {count} {technology} portfolio projects for the {domain} domain.

Mix: 2 beginner, 2 intermediate, 1 advanced.

For every project include:
- projectExplanation: detailedOverview (8-10 sentences), keyObjectives (5), targetAudience,
  realWorldApplications (3), businessProblem, businessQuestions, architectureLayers,
  securityCompliance, businessImpact and a 2-3 sentence interviewSummary
- features: 6-8 features specific to {domain}, each marked must-have or nice-to-have
- databaseSchema: 4-6 tables with typed columns, constraints and relationships
- apiEndpoints: 8-10 RESTful endpoints including auth and CRUD
- implementationGuide: 6-8 steps with realistic hour estimates
- workflowDiagrams: exactly 3 Mermaid diagrams (flowchart architecture, erDiagram, sequenceDiagram),
  with newlines escaped as \\n

Return ONLY valid JSON in this exact format:
{{
  "projects": [
    {{
      "title": "Descriptive Project Title",
      "description": "2-3 sentence overview",
      "difficulty": "beginner|intermediate|advanced",
      "estimatedDays": 10,
      "projectExplanation": {{"detailedOverview": "...", "keyObjectives": ["..."], "interviewSummary": "..."}},
      "learningOutcomes": ["{technology} fundamentals", "REST API design"],
      "prerequisites": ["Basic {technology}", "Git"],
      "industryRelevance": "Why this matters in {domain}",
      "techStack": {{"backend": [{{"name": "{technology}", "category": "Core Language", "reason": "..."}}]}},
      "workflowDiagrams": [
        {{"title": "System Architecture", "type": "architecture", "description": "...",
          "mermaidCode": "flowchart TB\\n    A[Client] --> B[API]"}}
      ],
      "features": [{{"name": "User Authentication", "description": "...", "priority": "must-have"}}],
      "databaseSchema": [{{"name": "users", "description": "...", "columns": [{{"name": "id", "type": "uuid", "constraints": ["PRIMARY KEY"]}}], "relationships": []}}],
      "apiEndpoints": [{{"method": "POST", "path": "/api/auth/login", "description": "..."}}],
      "implementationGuide": [{{"step": 1, "title": "Project Setup", "description": "...", "estimatedHours": 2, "tips": ["..."]}}]
    }}
  ]
}}

Return exactly {count} projects with every section filled in, specific to {domain} and {technology}."""
