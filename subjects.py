# Built-in question/answer banks.
# Order matters: it is the random-question pool and the fuzzy scan order.

SUBJECT_NAMES = {
    "science": "Science",
    "maths": "Maths",
}

SUBJECTS = {
    "science": {
        "What is the chemical formula for water?": (
            "The chemical formula for water is H₂O, which means each water molecule consists "
            "of two hydrogen atoms and one oxygen atom."
        ),
        "Explain Newton's First Law of Motion.": (
            "Newton's First Law of Motion, also called the Law of Inertia, states that an object "
            "at rest stays at rest and an object in motion stays in motion with the same speed "
            "and in the same direction unless acted upon by an unbalanced force."
        ),
        "What is photosynthesis?": (
            "Photosynthesis is the process by which green plants and some other organisms use "
            "sunlight to synthesize foods with the help of chlorophyll. They convert carbon "
            "dioxide and water into glucose and release oxygen as a byproduct."
        ),
        "Describe the structure of an atom.": (
            "An atom consists of a nucleus containing protons (positively charged) and neutrons "
            "(neutral), surrounded by electrons (negatively charged) in orbitals. The number of "
            "protons determines the element."
        ),
        "What are the three states of matter?": (
            "The three states of matter are solid (fixed shape and volume), liquid (fixed volume "
            "but takes shape of container), and gas (fills entire container). There's also plasma "
            "(ionized gas) and Bose-Einstein condensates at extreme conditions."
        ),
    },
    "maths": {
        "What is the Pythagorean theorem?": (
            "The Pythagorean theorem states that in a right-angled triangle, the square of the "
            "hypotenuse (the side opposite the right angle) is equal to the sum of the squares "
            "of the other two sides: a² + b² = c²."
        ),
        "How do you calculate the area of a circle?": (
            "The area of a circle is calculated using the formula A = πr², where A is area, π is "
            "approximately 3.14159, and r is the radius of the circle."
        ),
        "Solve for x: 2x + 5 = 15": (
            "To solve 2x + 5 = 15: Subtract 5 from both sides (2x = 10), then divide both sides "
            "by 2 (x = 5). The solution is x = 5."
        ),
        "What is the value of pi to 5 decimal places?": (
            "The value of pi (π) to 5 decimal places is 3.14159. Pi is the ratio of a circle's "
            "circumference to its diameter and is an irrational number."
        ),
        "Explain the concept of derivatives in calculus.": (
            "In calculus, a derivative represents the rate at which a function is changing at any "
            "given point. It's the slope of the tangent line to the function's curve at that "
            "point, used to analyze rates of change in various applications."
        ),
    },
}
