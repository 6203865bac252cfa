import re
import unicodedata

# Letras turcas sem decomposição NFKD (ı) ou que geram lixo ao minusculizar (İ)
_TRANSLITERATION = str.maketrans({
    'ğ': 'g', 'Ğ': 'g',
    'ü': 'u', 'Ü': 'u',
    'ş': 's', 'Ş': 's',
    'ı': 'i', 'I': 'i', 'İ': 'i',
    'ö': 'o', 'Ö': 'o',
    'ç': 'c', 'Ç': 'c',
})


def slugify(name):
    """'Çiçek Sepeti' -> 'cicek-sepeti'"""
    text = (name or '').translate(_TRANSLITERATION)
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^a-z0-9]+', '-', text.lower())
    return text.strip('-')
