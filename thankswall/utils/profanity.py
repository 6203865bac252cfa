"""
Filtro simples de palavrões
"""
import re

# Só palavras inteiras; termos comuns como "mal" ficam de fora
PROFANITY_WORDS = [
    'porra',
    'caralho',
    'merda',
    'bosta',
    'idiota',
    'imbecil',
    'babaca',
    'otário',
    'otario',
    'arrombado',
    'cuzão',
    'fdp',
]

# Substituições comuns para burlar o filtro (l33t)
_SUBSTITUTIONS = str.maketrans({
    '0': 'o', '@': 'o',
    '1': 'i', '!': 'i',
    '3': 'e',
    '4': 'a',
    '5': 's',
    '7': 't',
})

_PATTERNS = [re.compile(rf'\b{re.escape(word)}\b', re.IGNORECASE) for word in PROFANITY_WORDS]


def contains_profanity(text):
    lower_text = text.lower()
    for candidate in (lower_text, lower_text.translate(_SUBSTITUTIONS)):
        if any(pattern.search(candidate) for pattern in _PATTERNS):
            return True
    return False
