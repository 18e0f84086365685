"""
StudyBot — Seed Questions
Grade 10-11 maths, multiple choice. Each wrong choice carries the
misconception it usually signals.
"""


def _choices(a, b, c, d):
    return {
        letter: {"text": text, "weakness_tag": tag}
        for letter, (text, tag) in zip("ABCD", (a, b, c, d))
    }


QUESTIONS = [
    # ─── Algebra ─────────────────────────────────────────────────────────────
    {
        "id": "alg_e1",
        "topic": "algebra",
        "difficulty": "easy",
        "question_text": "Solve for x: 2x + 6 = 14",
        "choices": _choices(("x = 4", None), ("x = 10", "sign_error"), ("x = 7", "division_step"), ("x = 20", "inverse_operations")),
        "correct_choice": "A",
        "explanation": "Subtract 6 from both sides (2x = 8), then divide by 2.",
    },
    {
        "id": "alg_m1",
        "topic": "algebra",
        "difficulty": "medium",
        "question_text": "Factorise fully: x² - 5x + 6",
        "choices": _choices(("(x + 2)(x + 3)", "sign_error"), ("(x - 2)(x - 3)", None), ("(x - 1)(x - 6)", "factor_pairs"), ("(x - 6)(x + 1)", "factor_pairs")),
        "correct_choice": "B",
        "explanation": "You need two numbers that multiply to 6 and add to -5: -2 and -3.",
    },
    {
        "id": "alg_m2",
        "topic": "algebra",
        "difficulty": "medium",
        "question_text": "Simplify: (2³ × 2⁴) ÷ 2⁵",
        "choices": _choices(("2²", None), ("2¹²", "exponent_laws"), ("2⁷", "exponent_laws"), ("4", None)),
        "correct_choice": "A",
        "explanation": "Add exponents when multiplying (2⁷), subtract when dividing: 2⁷⁻⁵ = 2².",
    },
    {
        "id": "alg_h1",
        "topic": "algebra",
        "difficulty": "hard",
        "question_text": "Solve: x² - 4x - 5 < 0",
        "choices": _choices(("x < -1 or x > 5", "inequality_direction"), ("-1 < x < 5", None), ("-5 < x < 1", "sign_error"), ("x > 5", "inequality_direction")),
        "correct_choice": "B",
        "explanation": "Roots are -1 and 5; the parabola opens upward, so it is negative between the roots.",
    },

    # ─── Geometry ────────────────────────────────────────────────────────────
    {
        "id": "geo_e1",
        "topic": "geometry",
        "difficulty": "easy",
        "question_text": "Two angles of a triangle are 50° and 60°. What is the third angle?",
        "choices": _choices(("70°", None), ("80°", "angle_sum"), ("110°", "angle_sum"), ("90°", "angle_sum")),
        "correct_choice": "A",
        "explanation": "Angles in a triangle add up to 180°: 180 - 50 - 60 = 70.",
    },
    {
        "id": "geo_m1",
        "topic": "geometry",
        "difficulty": "medium",
        "question_text": "What is the distance between (1, 2) and (4, 6)?",
        "choices": _choices(("7", "distance_formula"), ("5", None), ("25", "square_root"), ("√7", "distance_formula")),
        "correct_choice": "B",
        "explanation": "√((4-1)² + (6-2)²) = √(9 + 16) = √25 = 5.",
    },
    {
        "id": "geo_h1",
        "topic": "geometry",
        "difficulty": "hard",
        "question_text": "An angle at the centre of a circle is 140°. What is the angle at the circumference on the same arc?",
        "choices": _choices(("140°", "circle_theorems"), ("280°", "circle_theorems"), ("70°", None), ("40°", "circle_theorems")),
        "correct_choice": "C",
        "explanation": "The angle at the centre is twice the angle at the circumference.",
    },

    # ─── Trigonometry ────────────────────────────────────────────────────────
    {
        "id": "trig_e1",
        "topic": "trigonometry",
        "difficulty": "easy",
        "question_text": "In a right triangle, opposite = 3 and hypotenuse = 5. What is sin θ?",
        "choices": _choices(("3/5", None), ("4/5", "sohcahtoa"), ("3/4", "sohcahtoa"), ("5/3", "ratio_inversion")),
        "correct_choice": "A",
        "explanation": "sin θ = opposite / hypotenuse = 3/5.",
    },
    {
        "id": "trig_m1",
        "topic": "trigonometry",
        "difficulty": "medium",
        "question_text": "What is the exact value of tan 45°?",
        "choices": _choices(("√2/2", "special_angles"), ("1", None), ("√3", "special_angles"), ("0", "special_angles")),
        "correct_choice": "B",
        "explanation": "In a 45-45-90 triangle the opposite and adjacent sides are equal.",
    },
    {
        "id": "trig_h1",
        "topic": "trigonometry",
        "difficulty": "hard",
        "question_text": "Simplify: sin²x + cos²x - 1",
        "choices": _choices(("1", "identities"), ("0", None), ("2sin²x", "identities"), ("tan²x", "identities")),
        "correct_choice": "B",
        "explanation": "sin²x + cos²x = 1, so the expression is 0.",
    },

    # ─── Calculus ────────────────────────────────────────────────────────────
    {
        "id": "calc_e1",
        "topic": "calculus",
        "difficulty": "easy",
        "question_text": "What is the derivative of f(x) = x³?",
        "choices": _choices(("3x²", None), ("x²", "power_rule"), ("3x³", "power_rule"), ("x⁴/4", "integration_confusion")),
        "correct_choice": "A",
        "explanation": "Power rule: bring the power down and subtract one.",
    },
    {
        "id": "calc_m1",
        "topic": "calculus",
        "difficulty": "medium",
        "question_text": "f(x) = 2x² - 4x. At which x is the gradient zero?",
        "choices": _choices(("x = 2", "derivative_solve"), ("x = 1", None), ("x = 0", "derivative_solve"), ("x = -1", "sign_error")),
        "correct_choice": "B",
        "explanation": "f'(x) = 4x - 4 = 0 gives x = 1.",
    },
    {
        "id": "calc_h1",
        "topic": "calculus",
        "difficulty": "hard",
        "question_text": "Find lim (x→2) of (x² - 4)/(x - 2)",
        "choices": _choices(("0", "limits"), ("undefined", "limits"), ("4", None), ("2", "limits")),
        "correct_choice": "C",
        "explanation": "Factorise: (x-2)(x+2)/(x-2) = x + 2, which approaches 4.",
    },

    # ─── Statistics ──────────────────────────────────────────────────────────
    {
        "id": "stat_e1",
        "topic": "statistics",
        "difficulty": "easy",
        "question_text": "What is the median of 3, 7, 1, 9, 5?",
        "choices": _choices(("5", None), ("1", "ordering_data"), ("25", "mean_vs_median"), ("7", "ordering_data")),
        "correct_choice": "A",
        "explanation": "Order the data (1, 3, 5, 7, 9); the middle value is 5.",
    },
    {
        "id": "stat_m1",
        "topic": "statistics",
        "difficulty": "medium",
        "question_text": "A fair die is rolled. What is P(even number)?",
        "choices": _choices(("1/6", "probability_counting"), ("1/3", "probability_counting"), ("1/2", None), ("2/3", "probability_counting")),
        "correct_choice": "C",
        "explanation": "Three of the six outcomes (2, 4, 6) are even.",
    },
    {
        "id": "stat_h1",
        "topic": "statistics",
        "difficulty": "hard",
        "question_text": "P(A) = 0.4, P(B) = 0.5 and A, B are independent. What is P(A or B)?",
        "choices": _choices(("0.9", "addition_rule"), ("0.7", None), ("0.2", "addition_rule"), ("0.1", "addition_rule")),
        "correct_choice": "B",
        "explanation": "P(A or B) = 0.4 + 0.5 - 0.4 × 0.5 = 0.7.",
    },

    # ─── Functions ───────────────────────────────────────────────────────────
    {
        "id": "func_e1",
        "topic": "functions",
        "difficulty": "easy",
        "question_text": "f(x) = 3x - 2. What is f(4)?",
        "choices": _choices(("10", None), ("14", "substitution"), ("12", "substitution"), ("2", "substitution")),
        "correct_choice": "A",
        "explanation": "Substitute: 3(4) - 2 = 10.",
    },
    {
        "id": "func_m1",
        "topic": "functions",
        "difficulty": "medium",
        "question_text": "What is the y-intercept of y = 2x² - 3x + 5?",
        "choices": _choices(("-3", "intercepts"), ("2", "intercepts"), ("5", None), ("0", "intercepts")),
        "correct_choice": "C",
        "explanation": "Set x = 0: y = 5.",
    },
    {
        "id": "func_h1",
        "topic": "functions",
        "difficulty": "hard",
        "question_text": "What is the horizontal asymptote of y = 3/(x - 1) + 2?",
        "choices": _choices(("y = 3", "asymptotes"), ("x = 1", "asymptotes"), ("y = 2", None), ("y = 0", "asymptotes")),
        "correct_choice": "C",
        "explanation": "As x grows, 3/(x-1) → 0 so y → 2.",
    },

    # ─── Number patterns ─────────────────────────────────────────────────────
    {
        "id": "pat_e1",
        "topic": "number_patterns",
        "difficulty": "easy",
        "question_text": "What is the next term: 4, 9, 14, 19, ...?",
        "choices": _choices(("23", "common_difference"), ("24", None), ("25", "common_difference"), ("29", "common_difference")),
        "correct_choice": "B",
        "explanation": "The common difference is 5.",
    },
    {
        "id": "pat_m1",
        "topic": "number_patterns",
        "difficulty": "medium",
        "question_text": "The nth term is Tn = 3n + 2. What is T₁₀?",
        "choices": _choices(("32", None), ("35", "substitution"), ("30", "substitution"), ("50", "substitution")),
        "correct_choice": "A",
        "explanation": "3(10) + 2 = 32.",
    },
    {
        "id": "pat_h1",
        "topic": "number_patterns",
        "difficulty": "hard",
        "question_text": "Quadratic pattern 2, 5, 10, 17, ... What is the general term?",
        "choices": _choices(("n² + 1", None), ("3n - 1", "quadratic_patterns"), ("n² + 2", "quadratic_patterns"), ("2n² - 1", "quadratic_patterns")),
        "correct_choice": "A",
        "explanation": "Second difference is 2, so a = 1; checking n = 1 gives c = 1.",
    },
]
