"""
Static content behind the informational screens.

Edited by hand; there is no database table for any of it.
"""

ABOUT_US = {
    'title': 'Nuestra Herencia',
    'tagline': 'En Diana Laura, cada pieza cuenta una historia de elegancia y pasión artesanal.',
    'sections': [
        {
            'title': 'Misión',
            'body': 'Ofrecer joyería de alta calidad que realce la belleza natural y la confianza de cada mujer.',
        },
        {
            'title': 'Artesanía',
            'body': 'Utilizamos materiales premium y procesos hechos a mano para garantizar piezas únicas y duraderas.',
        },
    ],
    'stats': [
        {'value': '10+', 'label': 'Años de Tradición'},
        {'value': '5k+', 'label': 'Clientes Felices'},
        {'value': '100%', 'label': 'Oro Ético'},
    ],
}

LOCATION = {
    'title': 'Nuestra Ubicación',
    'tagline': 'Visítanos en nuestra boutique exclusiva para una experiencia personalizada.',
    'name': 'Diana Laura Boutique',
    'address': 'Av. de la Reforma 456, Piso 10, CDMX, México.',
    'hours': 'Lunes a Sábado de 10:00 AM - 8:00 PM',
    'map_embed_url': (
        'https://www.google.com/maps/embed?pb=!1m18!1m12!1m3!1d3762.4804564344!2d-99.1674!3d19.4326'
        '!2m3!1f0!2f0!3f0!3m2!1i1024!2i768!4f13.1!3m3!1m2!1s0x0%3A0x0'
        '!2zMTnCsDI1JzU3LjQiTiA5OcKwMTAnMDIuNiJX!5e0!3m2!1ses!2smx!4v1625500000000!5m2!1ses!2smx'
    ),
}

# Display order is the list order
ADMIN_REPORTS = [
    {
        'id': 1,
        'title': 'Ventas Totales',
        'description': 'Análisis completo de las ventas por período, productos y clientes.',
        'icon': 'fa-chart-line',
    },
    {
        'id': 2,
        'title': 'Productos Más Vendidos',
        'description': 'Listado de los productos con mayor demanda y ventas del período.',
        'icon': 'fa-star',
    },
    {
        'id': 3,
        'title': 'Performance Trabajadores',
        'description': 'Análisis del desempeño e indicadores de cada miembro del equipo.',
        'icon': 'fa-users',
    },
]


def get_report(report_id):
    """Report descriptor by id, or None"""
    for report in ADMIN_REPORTS:
        if report['id'] == report_id:
            return report
    return None
