from django.db import models


class Category(models.Model):
    """Product categories; an inactive category hides its name from the catalog"""
    nombre = models.CharField(max_length=100, unique=True)
    descripcion = models.TextField(blank=True, default='')
    activo = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.nombre

    class Meta:
        db_table = 'categorias'
        ordering = ['nombre']
        verbose_name_plural = 'categories'


class Product(models.Model):
    """Jewelry piece shown in the public catalog"""
    nombre = models.CharField(max_length=200, db_index=True)
    descripcion = models.TextField(blank=True, default='')
    precio = models.DecimalField(max_digits=10, decimal_places=2)
    categoria = models.ForeignKey(Category, on_delete=models.CASCADE, null=True, blank=True, related_name='productos')
    imagen = models.CharField(max_length=500, blank=True, default='')
    stock = models.PositiveIntegerField(default=0)
    activo = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.nombre

    @property
    def categoria_nombre(self):
        """Category name, or None when the category is missing or inactive"""
        if self.categoria_id and self.categoria.activo:
            return self.categoria.nombre
        return None

    class Meta:
        db_table = 'productos'
        ordering = ['-id']
        indexes = [
            models.Index(fields=['activo'], name='idx_productos_activo'),
        ]
